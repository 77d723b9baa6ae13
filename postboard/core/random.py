"""
Generate random tokens
"""

import secrets


def session_token():
    return secrets.token_urlsafe(40)


def csrf_token():
    return secrets.token_urlsafe(32)
