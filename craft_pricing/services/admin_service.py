from typing import Optional

from sqlalchemy.orm import Session

from craft_pricing.core.security import get_password_hash, verify_password
from craft_pricing.models.user import AdminUser


def get_admin_by_username(db: Session, username: str) -> Optional[AdminUser]:
    return db.query(AdminUser).filter(AdminUser.username == username).first()


def create_admin_user(
    db: Session, username: str, password: str, email: Optional[str] = None
) -> AdminUser:
    if get_admin_by_username(db, username):
        raise ValueError(f"Username '{username}' already taken")

    admin = AdminUser(
        username=username,
        email=email,
        hashed_password=get_password_hash(password),
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin


def authenticate(db: Session, username: str, password: str) -> Optional[AdminUser]:
    admin = get_admin_by_username(db, username)
    if not admin or not admin.is_active:
        return None
    if not verify_password(password, admin.hashed_password):
        return None
    return admin
