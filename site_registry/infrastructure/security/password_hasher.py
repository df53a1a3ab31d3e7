"""
bcrypt password hashing.
"""
import bcrypt

from ...application.interfaces.services import PasswordHasher

# bcrypt ignores everything past 72 bytes; newer releases reject it outright
BCRYPT_MAX_BYTES = 72


def _secret(password: str) -> bytes:
    return password.encode('utf-8')[:BCRYPT_MAX_BYTES]


class BcryptPasswordHasher(PasswordHasher):
    """
    Salted bcrypt hashes stored as their modular-crypt string.

    Tests run with 4 rounds; deployments keep the default work factor.
    """

    def __init__(self, rounds: int = 12):
        self._rounds = rounds

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(_secret(password), bcrypt.gensalt(rounds=self._rounds)).decode('ascii')

    def verify(self, password: str, hashed: str) -> bool:
        """False for a wrong password and for anything that is not a bcrypt hash."""
        try:
            return bcrypt.checkpw(_secret(password), hashed.encode('ascii'))
        except (ValueError, TypeError):
            return False
