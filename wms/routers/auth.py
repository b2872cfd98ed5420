from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from wms.config import get_settings
from wms.core.constants import DEFAULT_DASHBOARD_PATH
from wms.core.exceptions import AuthenticationFailure
from wms.core.session_auth import login_session, logout_session, session_user_id
from wms.dependencies import get_db, require_user
from wms.models.user import User
from wms.schemas.user import LoginRequest, PasswordChange, UserRead, UserRegister
from wms.services.user_service import authenticate, change_password, register_user

router = APIRouter(tags=["Auth"])


@router.get("/login", response_class=HTMLResponse)
def login_page(request: Request):
    if session_user_id(request) is not None:
        return RedirectResponse(url=DEFAULT_DASHBOARD_PATH, status_code=303)
    templates = request.app.state.templates
    return templates.TemplateResponse(request, "login.html", {"error": None})


@router.post("/login", response_class=HTMLResponse)
def login_submit(
    request: Request,
    username: str = Form(...),
    password: str = Form(...),
    db: Session = Depends(get_db),
):
    user = authenticate(db, username, password)
    if user is not None:
        login_session(request, user.id)
        return RedirectResponse(url=DEFAULT_DASHBOARD_PATH, status_code=303)

    templates = request.app.state.templates
    return templates.TemplateResponse(
        request,
        "login.html",
        {"error": "Invalid username or password."},
        status_code=401,
    )


@router.post("/logout")
def logout(request: Request):
    logout_session(request)
    return RedirectResponse(url="/login", status_code=303)


@router.post("/api/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(payload: UserRegister, request: Request, db: Session = Depends(get_db)):
    if not get_settings().ALLOW_REGISTRATION:
        raise HTTPException(status_code=403, detail="Registration is disabled.")
    profile = payload.model_dump(exclude={"username", "password", "confirm_password"})
    user = register_user(db, payload.username, payload.password, **profile)
    login_session(request, user.id)
    return user


@router.post("/api/login", response_model=UserRead)
def api_login(payload: LoginRequest, request: Request, db: Session = Depends(get_db)):
    user = authenticate(db, payload.username, payload.password)
    if user is None:
        raise AuthenticationFailure("Invalid username or password")
    login_session(request, user.id)
    return user


@router.post("/api/logout", status_code=status.HTTP_204_NO_CONTENT)
def api_logout(request: Request):
    logout_session(request)


@router.get("/api/user", response_model=UserRead)
def me(user: User = Depends(require_user)):
    return user


@router.post("/api/change-password", status_code=status.HTTP_204_NO_CONTENT)
def api_change_password(
    payload: PasswordChange,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    change_password(db, user.id, payload.current_password, payload.new_password)
