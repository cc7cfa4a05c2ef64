"""Password hashing helpers."""

from quorahub.extensions import bcrypt


def hash_password(plain_password: str) -> str:
    return bcrypt.generate_password_hash(plain_password).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    try:
        return bcrypt.check_password_hash(hashed_password, plain_password)
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False
