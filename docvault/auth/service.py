
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from docvault.models.user import User
from docvault.utils.security import hash_password, verify_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"

def normalize_email(email: str) -> str:
    return email.strip().lower()

def find_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()

def find_by_id(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)

def create_user(db: Session, email: str, password_hash: str, name: str | None = None, role: str = "user") -> User:
    user = User(email=normalize_email(email), password_hash=password_hash, name=name, role=role)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # the unique index on email decides concurrent registrations
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User with this email already exists")
    db.refresh(user)
    return user

def register_user(db: Session, name: str, email: str, password: str, admin_emails: set[str] = frozenset()) -> User:
    role = "admin" if normalize_email(email) in admin_emails else "user"
    user = create_user(db, email, hash_password(password), name=name, role=role)
    logger.info("registered user %s (role=%s)", user.id, user.role)
    return user

def authenticate(db: Session, email: str, password: str) -> User:
    user = find_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        logger.info("failed login attempt")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS)
    return user

def update_name(db: Session, user: User, name: str) -> User:
    user.name = name
    db.commit()
    db.refresh(user)
    return user
