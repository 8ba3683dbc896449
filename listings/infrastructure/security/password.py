"""Password hashing with bcrypt."""

import bcrypt

# Used when the user does not exist so both paths cost one bcrypt check
DUMMY_HASH = "$2b$12$C6UzMDM.H6dfI/f/IKcEeO5bMj8Lx0h8JIpVn1hQ3yL0fJSC4X7eS"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    try:
        result = bcrypt.checkpw(
            plain_password.encode("utf-8"), hashed_password.encode("utf-8")
        )
        assert isinstance(result, bool)
        return result
    except ValueError:
        return False


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt"""
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")
