"""
Every table model, imported together so relationships between them resolve.
"""

from .session import LoginSession
from .social import SocialAccount
from .user import User

__all__ = ["User", "LoginSession", "SocialAccount"]
