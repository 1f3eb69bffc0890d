from passlib.context import CryptContext
import os

# bcrypt cost; tests lower it through BCRYPT_ROUNDS
_BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "11") or 11)
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=_BCRYPT_ROUNDS,
)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Not a recognised hash (e.g. a legacy plain-text value)
        return False


def normalize_email(email: str) -> str:
    """Return a normalized email address for comparison and storage."""
    return (email or "").strip().lower()
