from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from ooh_portal.errors import FieldValidationError, NotFoundError
from ooh_portal.models import User
from ooh_portal.schemas import UserCreate, UserUpdate
from ooh_portal.security.passwords import hash_password
from ooh_portal.services.references import require_supplier


def get_user(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError('User')
    return user


def get_user_by_username(db: Session, username: str) -> User | None:
    return db.execute(select(User).where(User.username == username)).scalar_one_or_none()


def list_users(db: Session) -> list[User]:
    return db.execute(select(User).order_by(User.full_name.asc(), User.username.asc())).scalars().all()


def _ensure_username_free(db: Session, username: str, *, exclude_id: str | None = None) -> None:
    existing = get_user_by_username(db, username)
    if existing and existing.id != exclude_id:
        raise FieldValidationError('username', 'Username already exists')


def create_user(db: Session, data: UserCreate) -> User:
    _ensure_username_free(db, data.username)
    if data.supplier_id:
        require_supplier(db, data.supplier_id)

    user = User(
        username=data.username,
        password_hash=hash_password(data.password),
        full_name=data.full_name,
        email=data.email,
        role=data.role,
        supplier_id=data.supplier_id,
        active=data.active,
    )
    db.add(user)
    db.flush()
    return user


def update_user(db: Session, user_id: str, data: UserUpdate) -> User:
    user = get_user(db, user_id)
    changes = data.changes()

    if 'username' in changes:
        _ensure_username_free(db, changes['username'], exclude_id=user.id)
    if changes.get('supplier_id'):
        require_supplier(db, changes['supplier_id'])
    if 'password' in changes:
        user.password_hash = hash_password(changes.pop('password'))

    for field, value in changes.items():
        setattr(user, field, value)
    db.flush()
    return user
