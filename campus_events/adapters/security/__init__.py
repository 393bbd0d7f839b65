"""Security adapters - Password hashing and bearer tokens."""

from .passwords import BcryptPasswordHasher
from .tokens import JWTTokenService

__all__ = ["BcryptPasswordHasher", "JWTTokenService"]
