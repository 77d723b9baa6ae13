"""
Rename `social_accounts.profile_picture` to `avatar`, matching the naming of
the other identity fields.
"""

from sqlalchemy import Connection

from .base import Migration, rename_column


class RenameProfilePictureToAvatar(Migration):
    name = "2025_05_12_111510_rename_profile_picture_to_avatar_in_social_accounts"

    def up(self, conn: Connection):
        rename_column(conn, "social_accounts", old="profile_picture", new="avatar")

    def down(self, conn: Connection):
        rename_column(conn, "social_accounts", old="avatar", new="profile_picture")
