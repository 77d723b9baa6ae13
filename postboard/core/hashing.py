"""
Utilities for hashing and comparing hashes. Session tokens are looked up by
a fast checksum; passwords use argon2.
"""

from __future__ import annotations

import hashlib

import xxhash
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

_password_hasher = PasswordHasher()


class UnsupportedHashAlgorithm(Exception):
    pass


def match_name_to_algorithm(name: str) -> hashlib._Hash:
    match name:
        case "xxh3":
            return xxhash.xxh3_64
        case _:
            raise UnsupportedHashAlgorithm(f"Algorithm {name} not supported")


def checksum(content: str | bytes, hash_algorithm: str = "xxh3") -> str:
    """
    Calculate a fresh hash (named checksum to avoid colliding with
    internal function hash) of some content.
    """
    algorithm = match_name_to_algorithm(hash_algorithm)

    if isinstance(content, str):
        content = content.encode()

    return algorithm(content).hexdigest()


def hash_password(password: str) -> str:
    return _password_hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return _password_hasher.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False
