from typing import Optional

from sqlalchemy.orm import Session

from academy.core.exceptions import ConflictError, ValidationError
from academy.core.security import get_password_hash, verify_password
from academy.models.user import User
from academy.schemas.user import UserCreate

MIN_PASSWORD_LENGTH = 6


def register_user(db: Session, data: UserCreate, role: str = "user") -> User:
    """Create an account. Emails are stored lower-cased and must be unique."""
    email = str(data.email).strip().lower()
    if len(data.password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if not data.full_name.strip():
        raise ValidationError("Full name is required")
    if db.query(User.id).filter(User.email == email).first() is not None:
        raise ConflictError("Email already registered", details={"email": email})

    user = User(
        email=email,
        password_hash=get_password_hash(data.password),
        full_name=data.full_name.strip(),
        phone=data.phone,
        avatar_url=data.avatar_url,
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    user = db.query(User).filter(User.email == email.strip().lower()).first()
    if user is None or not verify_password(password, user.password_hash):
        return None
    return user
