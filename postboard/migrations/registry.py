"""
Every migration, in the order it must be applied.
"""

from .create_sessions_table import CreateSessionsTable
from .create_social_accounts_table import CreateSocialAccountsTable
from .create_users_table import CreateUsersTable
from .rename_profile_picture_to_avatar import RenameProfilePictureToAvatar

ALL_MIGRATIONS = (
    CreateUsersTable(),
    CreateSessionsTable(),
    CreateSocialAccountsTable(),
    RenameProfilePictureToAvatar(),
)
