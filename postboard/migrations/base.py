"""
Base class for schema migrations and the schema helpers they share.
"""

import abc

from sqlalchemy import Connection, MetaData, Table, text


class Migration(abc.ABC):
    """
    A reversible schema change. Downstream must implement:

    - up: apply the change.
    - down: revert exactly what `up` did.

    Both are handed a connection inside an open transaction. Errors raised by
    the database (a missing table or column, for instance) are not caught here
    and propagate to the runner.
    """

    name: str

    @abc.abstractmethod
    def up(self, conn: Connection):
        raise NotImplementedError

    @abc.abstractmethod
    def down(self, conn: Connection):
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name}>"


def reflect(conn: Connection, table_name: str, metadata: MetaData) -> Table:
    """
    Load the current definition of `table_name` into `metadata`, so that new
    tables can reference it with foreign keys.
    """
    return Table(table_name, metadata, autoload_with=conn)


def rename_column(conn: Connection, table_name: str, old: str, new: str):
    """
    Rename a column in place. Supported by PostgreSQL and SQLite >= 3.25.
    """
    quote = conn.dialect.identifier_preparer.quote

    conn.execute(
        text(
            f"ALTER TABLE {quote(table_name)} "
            f"RENAME COLUMN {quote(old)} TO {quote(new)}"
        )
    )
