# resumatch/routes/auth.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from resumatch.core.errors import AuthError, EmailAlreadyRegisteredError, InvalidCredentialsError
from resumatch.db.session import get_db
from resumatch.routes.deps import get_auth, get_session_context, require_user
from resumatch.schemas.base import LoginRequest, SignupRequest, UserOut
from resumatch.services.auth_service import AuthService, SessionContext
from resumatch.utils.tracking import track


router = APIRouter(prefix="/auth", tags=["auth"])


def _start_session(request: Request, user: UserOut) -> None:
    if "session" in request.scope:
        request.session.clear()
        request.session["user_id"] = user.id


# ---------- Email + Password ----------
@router.post("/signup", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def signup(
    payload: SignupRequest,
    request: Request,
    db: Session = Depends(get_db),
    auth: AuthService = Depends(get_auth),
):
    try:
        user = auth.signup(db, payload.email, payload.password, payload.name)
    except EmailAlreadyRegisteredError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except AuthError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    _start_session(request, user)
    track(request, "signup")
    return user


@router.post("/login", response_model=UserOut)
async def login(
    payload: LoginRequest,
    request: Request,
    db: Session = Depends(get_db),
    auth: AuthService = Depends(get_auth),
):
    try:
        user = auth.login(db, payload.email, payload.password)
    except InvalidCredentialsError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc))
    _start_session(request, user)
    track(request, "login")
    return user


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    request: Request,
    ctx: SessionContext = Depends(get_session_context),
    auth: AuthService = Depends(get_auth),
):
    auth.logout(ctx)
    if "session" in request.scope:
        request.session.clear()


@router.get("/me", response_model=UserOut)
async def me(ctx: SessionContext = Depends(require_user)):
    return ctx.user
