
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from passlib.context import CryptContext
from jose import jwt, JWTError

ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["bcrypt_sha256", "bcrypt"], deprecated="auto")

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(password: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(password, hashed)
    except (ValueError, TypeError):
        return False


@dataclass(frozen=True)
class TokenClaims:
    id: int
    email: str
    name: str | None = None


class TokenService:
    """Issues and checks the bearer tokens handed out at login."""

    def __init__(self, secret_key: str, expire_minutes: int = 60 * 24 * 7):
        self.secret_key = secret_key
        self.expire_minutes = expire_minutes

    def issue(self, user, expires_minutes: int | None = None) -> str:
        expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes or self.expire_minutes)
        to_encode = {"sub": str(user.id), "email": user.email, "name": user.name, "exp": expire}
        return jwt.encode(to_encode, self.secret_key, algorithm=ALGORITHM)

    def decode(self, token: str) -> dict:
        return jwt.decode(token, self.secret_key, algorithms=[ALGORITHM])

    def verify(self, token: str) -> TokenClaims | None:
        try:
            payload = self.decode(token)
        except JWTError:
            return None

        sub = payload.get("sub")
        email = payload.get("email")
        if not sub or not str(sub).isdigit() or not email:
            return None
        return TokenClaims(id=int(sub), email=email, name=payload.get("name"))
