
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session
from docvault import responses
from docvault.auth.deps import get_db, get_tokens, get_current_claims
from docvault.auth.service import register_user, authenticate, find_by_id, update_name
from docvault.schemas.auth import RegisterIn, LoginIn, ProfileUpdateIn, UserOut, AuthOut
from docvault.utils.security import TokenClaims, TokenService

router = APIRouter(prefix="/auth", tags=["auth"])

def _profile(db: Session, claims: TokenClaims):
    user = find_by_id(db, claims.id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user

@router.post("/register", status_code=201)
def register(body: RegisterIn, request: Request, db: Session = Depends(get_db),
             tokens: TokenService = Depends(get_tokens)):
    admins = request.app.state.settings.admin_email_set
    user = register_user(db, body.name, body.email, body.password, admin_emails=admins)
    out = AuthOut(user=UserOut.model_validate(user), token=tokens.issue(user))
    return responses.created(out, "User registered successfully")

@router.post("/login")
def login(body: LoginIn, db: Session = Depends(get_db), tokens: TokenService = Depends(get_tokens)):
    user = authenticate(db, body.email, body.password)
    out = AuthOut(user=UserOut.model_validate(user), token=tokens.issue(user))
    return responses.success(out, "Login successful")

@router.get("/me")
def me(db: Session = Depends(get_db), claims: TokenClaims = Depends(get_current_claims)):
    user = _profile(db, claims)
    return responses.success({"user": UserOut.model_validate(user)}, "User profile retrieved successfully")

@router.patch("/me")
def update_me(body: ProfileUpdateIn, db: Session = Depends(get_db),
              claims: TokenClaims = Depends(get_current_claims)):
    user = update_name(db, _profile(db, claims), body.name)
    return responses.success({"user": UserOut.model_validate(user)}, "Profile updated successfully")
