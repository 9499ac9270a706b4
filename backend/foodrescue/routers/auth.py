# foodrescue/routers/auth.py
from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm

from foodrescue.core.config import Settings, get_settings
from foodrescue.core.errors import InvalidInput
from foodrescue.core.logging import get_logger
from foodrescue.core.security import create_token, hash_password, verify_password
from foodrescue.deps import get_current_user, get_repo, get_session
from foodrescue.models.donor import DonorOut
from foodrescue.schemas import PasswordChangeIn, RegisterIn, SessionOut, TokenOut
from foodrescue.services.identity import Session, role_for_new_user

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = get_logger(__name__)


def _token_out(user: dict, settings: Settings) -> dict:
    token = create_token({"sub": user["id"], "role": user["role"]}, settings)
    return {"access_token": token, "token_type": "bearer", "role": user["role"], "email": user["email"]}


def session_out(session: Session) -> SessionOut:
    return SessionOut(
        principal_id=session.principal_id,
        email=session.email,
        is_admin=session.is_admin,
        donor=DonorOut.model_validate(session.donor) if session.donor else None,
    )

# ---------- Register (JSON) ----------
@router.post("/register", response_model=TokenOut, status_code=201)
async def register(body: RegisterIn, repo=Depends(get_repo), settings: Settings = Depends(get_settings)):
    role = role_for_new_user(body.email, settings)
    user = await repo.create_user(body.email, hash_password(body.password), role)

    # sign-up form may carry the business profile; otherwise it is completed later
    if body.profile:
        await repo.create_donor(user["id"], {**body.profile.model_dump(), "email": user["email"]})

    logger.info("Registered %s as %s", user["email"], role)
    return _token_out(user, settings)

# ---------- Login (OAuth2 form) ----------
@router.post("/token", response_model=TokenOut)
async def login(
    form: OAuth2PasswordRequestForm = Depends(),
    repo=Depends(get_repo),
    settings: Settings = Depends(get_settings),
):
    user = await repo.find_user_by_email(form.username)
    if not user or not verify_password(form.password, user.get("password_hash", "")):
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return _token_out(user, settings)


@router.get("/me", response_model=SessionOut)
async def me(session: Session = Depends(get_session)):
    return session_out(session)


@router.post("/password")
async def change_password(body: PasswordChangeIn, user: dict = Depends(get_current_user), repo=Depends(get_repo)):
    if not verify_password(body.current_password, user.get("password_hash", "")):
        raise InvalidInput("Current password is incorrect")
    await repo.update_user(user["id"], {"password_hash": hash_password(body.new_password)})
    logger.info("Password changed for %s", user["email"])
    return {"ok": True}
