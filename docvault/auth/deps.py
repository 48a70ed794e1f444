
from fastapi import Request, Depends, HTTPException, status
from sqlalchemy.orm import Session
from docvault.auth.service import find_by_id
from docvault.extraction import TextExtractor
from docvault.models.user import User
from docvault.storage.files import FileStore
from docvault.utils.security import TokenClaims, TokenService


def get_db(request: Request):
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()

def get_tokens(request: Request) -> TokenService:
    return request.app.state.tokens

def get_file_store(request: Request) -> FileStore:
    return request.app.state.file_store

def get_extractor(request: Request) -> TextExtractor:
    return request.app.state.extractor


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )

def bearer_token(request: Request) -> str | None:
    auth = request.headers.get("Authorization")
    if not auth:
        return None
    scheme, _, token = auth.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()

def get_current_claims(request: Request, tokens: TokenService = Depends(get_tokens)) -> TokenClaims:
    token = bearer_token(request)
    if not token:
        raise _unauthorized("Unauthorized: No token provided")

    claims = tokens.verify(token)
    if claims is None:
        raise _unauthorized("Unauthorized: Invalid token")
    return claims

def get_current_user(claims: TokenClaims = Depends(get_current_claims), db: Session = Depends(get_db)) -> User:
    user = find_by_id(db, claims.id)
    if user is None:
        raise _unauthorized("Unauthorized: User not found")
    return user

def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden: Insufficient permissions")
    return user
