"""
Applies and reverts migrations, keeping track of what has run in the
`migrations` table. Migrations applied by one call to `migrate` share a batch
number, and `rollback` reverts the most recent batch by default.
"""

from collections.abc import Sequence

from sqlalchemy import (
    Column,
    Engine,
    Integer,
    MetaData,
    String,
    Table,
    delete,
    func,
    insert,
    select,
)
from structlog import get_logger
from structlog.typing import FilteringBoundLogger

from .base import Migration

metadata = MetaData()

migrations_table = Table(
    "migrations",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("migration", String(255), nullable=False, unique=True),
    Column("batch", Integer, nullable=False),
)


class UnknownMigrationError(Exception):
    pass


class MigrationRunner:
    engine: Engine
    migrations: tuple[Migration, ...]

    def __init__(
        self,
        engine: Engine,
        migrations: Sequence[Migration] | None = None,
        log: FilteringBoundLogger | None = None,
    ):
        if migrations is None:
            from .registry import ALL_MIGRATIONS

            migrations = ALL_MIGRATIONS

        names = [m.name for m in migrations]

        if len(set(names)) != len(names):
            raise ValueError("Migration names must be unique")

        self.engine = engine
        self.migrations = tuple(migrations)
        self.log = log if log is not None else get_logger()

        self._by_name = {m.name: m for m in self.migrations}

    def _ensure_table(self):
        with self.engine.begin() as conn:
            metadata.create_all(conn, tables=[migrations_table])

    def applied(self) -> list[tuple[str, int]]:
        """
        The (name, batch) of every applied migration, oldest first.
        """
        self._ensure_table()

        query = select(migrations_table.c.migration, migrations_table.c.batch).order_by(
            migrations_table.c.id
        )

        with self.engine.connect() as conn:
            return [(row.migration, row.batch) for row in conn.execute(query)]

    def pending(self) -> list[Migration]:
        done = {name for name, _ in self.applied()}
        return [m for m in self.migrations if m.name not in done]

    def status(self) -> list[tuple[str, bool]]:
        done = {name for name, _ in self.applied()}
        return [(m.name, m.name in done) for m in self.migrations]

    def migrate(self) -> list[str]:
        """
        Apply every pending migration, in order, as a single new batch. Each
        migration runs in its own transaction together with its bookkeeping
        row; a failure stops the run and leaves earlier migrations applied.
        """
        pending = self.pending()

        if not pending:
            self.log.info("migrations.nothing_to_migrate")
            return []

        with self.engine.connect() as conn:
            batch = (
                conn.execute(select(func.max(migrations_table.c.batch))).scalar() or 0
            ) + 1

        log = self.log.bind(batch=batch)
        applied = []

        for migration in pending:
            with self.engine.begin() as conn:
                migration.up(conn)
                conn.execute(
                    insert(migrations_table).values(
                        migration=migration.name, batch=batch
                    )
                )

            log.info("migrations.applied", migration=migration.name)
            applied.append(migration.name)

        return applied

    def rollback(self, steps: int | None = None) -> list[str]:
        """
        Revert the most recent batch, or the last `steps` migrations if given,
        newest first.
        """
        if steps is not None and steps < 0:
            raise ValueError(f"Cannot roll back a negative number of steps ({steps})")

        applied = list(reversed(self.applied()))

        if not applied:
            self.log.info("migrations.nothing_to_rollback")
            return []

        if steps is None:
            last_batch = applied[0][1]
            targets = [name for name, batch in applied if batch == last_batch]
        else:
            targets = [name for name, _ in applied[:steps]]

        reverted = []

        for name in targets:
            try:
                migration = self._by_name[name]
            except KeyError:
                raise UnknownMigrationError(
                    f"Migration {name} is recorded as applied but is not known"
                )

            with self.engine.begin() as conn:
                migration.down(conn)
                conn.execute(
                    delete(migrations_table).where(
                        migrations_table.c.migration == name
                    )
                )

            self.log.info("migrations.reverted", migration=name)
            reverted.append(name)

        return reverted

    def reset(self) -> list[str]:
        """
        Revert every applied migration.
        """
        return self.rollback(steps=len(self.applied()))
