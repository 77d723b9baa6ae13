"""
Server-side sessions, one row per logged-in client.
"""

from sqlalchemy import (
    Column,
    Connection,
    DateTime,
    ForeignKey,
    MetaData,
    String,
    Table,
    Uuid,
)

from .base import Migration, reflect


class CreateSessionsTable(Migration):
    name = "0001_01_01_000001_create_sessions_table"

    def up(self, conn: Connection):
        metadata = MetaData()
        reflect(conn, "users", metadata)

        Table(
            "sessions",
            metadata,
            Column("session_id", Uuid, primary_key=True),
            Column(
                "user_id",
                Uuid,
                ForeignKey("users.user_id", ondelete="CASCADE"),
                nullable=False,
                index=True,
            ),
            Column("hashed_token", String(255), nullable=False, unique=True),
            Column("created_at", DateTime(timezone=True), nullable=False),
            Column("last_activity", DateTime(timezone=True), nullable=False),
            Column("expires_at", DateTime(timezone=True), nullable=False),
        ).create(conn)

    def down(self, conn: Connection):
        Table("sessions", MetaData()).drop(conn)
