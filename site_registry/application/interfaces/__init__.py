# Application ports
from .repositories import SiteRepository, UserRepository
from .services import PasswordHasher, TokenService
from .unit_of_work import UnitOfWork

__all__ = [
    'PasswordHasher',
    'SiteRepository',
    'TokenService',
    'UnitOfWork',
    'UserRepository',
]
