from passlib.context import CryptContext

# Argon2 for stored passwords
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def verify_password(plain_password, hashed_password):
    """Checks if the typed password matches the saved hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    """Converts a plain password into an argon2 hash."""
    return pwd_context.hash(password)
