import hashlib
import hmac
import secrets
from typing import Optional

from sqlalchemy.orm import Session

from wms.config import get_settings
from wms.core.exceptions import AuthenticationFailure, ConstraintViolation, ValidationFailure
from wms.models.user import User
from wms.services.entity_store import EntityStore

_HASH_SCHEME = "pbkdf2_sha256"


def user_store(db: Session) -> EntityStore[User]:
    return EntityStore(
        db,
        User,
        order_by=(User.username,),
        unique_key="username",
        search_fields=("username", "first_name", "last_name", "email"),
    )


def _pbkdf2(password: str, salt: str, rounds: int) -> str:
    digest = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        rounds,
    )
    return digest.hex()


def hash_password(password: str, *, salt: Optional[str] = None, rounds: Optional[int] = None) -> str:
    if rounds is None:
        rounds = get_settings().PASSWORD_PBKDF2_ROUNDS
    if salt is None:
        salt = secrets.token_hex(16)
    return "{}${}${}${}".format(_HASH_SCHEME, rounds, salt, _pbkdf2(password, salt, rounds))


def verify_password(password: str, stored: Optional[str]) -> bool:
    if not stored:
        return False
    parts = stored.split("$")
    if len(parts) != 4 or parts[0] != _HASH_SCHEME:
        return False
    try:
        rounds = int(parts[1])
    except ValueError:
        return False
    computed = _pbkdf2(password, parts[2], rounds)
    return hmac.compare_digest(computed, parts[3])


def _validate_password(password: str) -> None:
    min_length = get_settings().MIN_PASSWORD_LENGTH
    if len(password or "") < min_length:
        raise ValidationFailure(
            "Password must be at least {} characters".format(min_length)
        )


def register_user(db: Session, username: str, password: str, **profile) -> User:
    username = (username or "").strip()
    if not username:
        raise ValidationFailure("Username is required")
    _validate_password(password)

    store = user_store(db)
    if store.get_by(username) is not None:
        raise ConstraintViolation("Username already exists: {}".format(username))

    fields = {key: value for key, value in profile.items() if value is not None}
    fields.update(username=username, password_hash=hash_password(password))
    return store.create(fields)


def authenticate(db: Session, username: str, password: str) -> Optional[User]:
    user = user_store(db).get_by((username or "").strip())
    if user is None or not user.is_active:
        return None
    if not verify_password(password or "", user.password_hash):
        return None
    return user


def change_password(db: Session, user_id: int, current_password: str, new_password: str) -> User:
    store = user_store(db)
    user = store.get(user_id)
    if user is None or not verify_password(current_password or "", user.password_hash):
        raise AuthenticationFailure("Current password is incorrect")
    _validate_password(new_password)
    return store.update(user_id, {"password_hash": hash_password(new_password)})


__all__ = [
    "authenticate",
    "change_password",
    "hash_password",
    "register_user",
    "user_store",
    "verify_password",
]
