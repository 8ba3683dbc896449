from listings.infrastructure.security.jwt import create_access_token, verify_token
from listings.infrastructure.security.password import get_password_hash, verify_password

__all__ = ["create_access_token", "verify_token", "get_password_hash", "verify_password"]
