"""
Password policy.

A password needs at least 8 characters, a digit, an uppercase letter
and a lowercase letter.
"""
from typing import List

from ..exceptions import WeakPasswordError

MIN_PASSWORD_LENGTH = 8


def check_password_strength(password: str) -> List[str]:
    """Return every rule the password breaks, empty when it is acceptable."""
    password = password or ''
    problems: List[str] = []
    if len(password) < MIN_PASSWORD_LENGTH:
        problems.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if not any(ch.isdigit() for ch in password):
        problems.append("Password must contain a number")
    if not any(ch.isupper() for ch in password):
        problems.append("Password must contain an uppercase letter")
    if not any(ch.islower() for ch in password):
        problems.append("Password must contain a lowercase letter")
    return problems


def ensure_strong_password(password: str) -> None:
    """
    Raises:
        WeakPasswordError: listing every failed rule
    """
    problems = check_password_strength(password)
    if problems:
        raise WeakPasswordError(problems)
