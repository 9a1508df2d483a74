"""Authentication module.

Provides functionality for:
- Registering librarian accounts with bcrypt password hashes
- Checking credentials before a token is issued
"""

from .models import User
from .schemas import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from .manager import AuthManager, check_password, hash_password

__all__ = [
    "AuthManager",
    "User",
    "RegisterRequest",
    "LoginRequest",
    "UserResponse",
    "TokenResponse",
    "hash_password",
    "check_password",
]
