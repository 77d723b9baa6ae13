"""
The users table.
"""

from sqlalchemy import Column, Connection, DateTime, MetaData, String, Table, Uuid

from .base import Migration


class CreateUsersTable(Migration):
    name = "0001_01_01_000000_create_users_table"

    def up(self, conn: Connection):
        metadata = MetaData()

        Table(
            "users",
            metadata,
            Column("user_id", Uuid, primary_key=True),
            Column("name", String(255), nullable=False),
            Column("email", String(255), nullable=False, unique=True),
            Column("password_hash", String(255), nullable=False),
            Column("created_at", DateTime(timezone=True), nullable=False),
        ).create(conn)

    def down(self, conn: Connection):
        Table("users", MetaData()).drop(conn)
