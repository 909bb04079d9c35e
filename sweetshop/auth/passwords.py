from werkzeug.security import check_password_hash, generate_password_hash


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    try:
        return check_password_hash(hashed_password, password)
    except ValueError:
        # Hashes written by another scheme (e.g. bcrypt rows from older databases).
        return False
