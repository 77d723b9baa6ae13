"""
UUID creation. Identifiers are time-ordered UUIDv7s, which are not part of
the python standard library as of 3.12.
"""

from uuid import UUID as UUID

from uuid_extensions import uuid7 as uuid7

__all__ = ["UUID", "uuid7"]
