"""
Security infrastructure components.
"""
from .jwt_handler import JWTHandler, TokenPayload
from .password_hasher import BcryptPasswordHasher

__all__ = [
    'BcryptPasswordHasher',
    'JWTHandler',
    'TokenPayload',
]
