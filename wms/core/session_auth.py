from __future__ import annotations

from typing import Optional

from fastapi import Request
from fastapi.responses import RedirectResponse

SESSION_USER_KEY = "user_id"


def session_user_id(request: Request) -> Optional[int]:
    value = request.session.get(SESSION_USER_KEY)
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def login_session(request: Request, user_id: int) -> None:
    request.session.clear()
    request.session[SESSION_USER_KEY] = user_id


def logout_session(request: Request) -> None:
    request.session.clear()


def redirect_if_unauthenticated(request: Request) -> Optional[RedirectResponse]:
    if session_user_id(request) is not None:
        return None
    return RedirectResponse(url="/login", status_code=303)
