"""
Linked social accounts. Created with the historical `profile_picture` column;
see `rename_profile_picture_to_avatar` for the current name.
"""

from sqlalchemy import (
    Column,
    Connection,
    DateTime,
    ForeignKey,
    MetaData,
    String,
    Table,
    Text,
    Uuid,
)

from .base import Migration, reflect


class CreateSocialAccountsTable(Migration):
    name = "2025_04_28_093012_create_social_accounts_table"

    def up(self, conn: Connection):
        metadata = MetaData()
        reflect(conn, "users", metadata)

        Table(
            "social_accounts",
            metadata,
            Column("social_account_id", Uuid, primary_key=True),
            Column(
                "user_id",
                Uuid,
                ForeignKey("users.user_id", ondelete="CASCADE"),
                nullable=False,
                index=True,
            ),
            Column("platform", String(64), nullable=False),
            Column("account_id", String(255), nullable=False),
            Column("username", String(255), nullable=True),
            Column("profile_picture", Text, nullable=True),
            Column("created_at", DateTime(timezone=True), nullable=False),
        ).create(conn)

    def down(self, conn: Connection):
        Table("social_accounts", MetaData()).drop(conn)
