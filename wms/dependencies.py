from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from wms.config import get_settings
from wms.core.security import authenticate_request
from wms.core.session_auth import session_user_id
from wms.database.session import get_db
from wms.models.user import User
from wms.services.user_service import user_store


def current_user(request: Request, db: Session = Depends(get_db)) -> Optional[User]:
    user_id = session_user_id(request)
    if user_id is None:
        return None
    user = user_store(db).get(user_id)
    if user is None or not user.is_active:
        return None
    return user


def require_auth(
    request: Request,
    user: Optional[User] = Depends(current_user),
    authorization: Optional[str] = Header(None),
) -> dict:
    if user is not None:
        return {"auth_type": "session", "user_id": user.id}

    api_key = request.headers.get(get_settings().API_KEY_HEADER)
    principal = authenticate_request(api_key=api_key, authorization=authorization)
    if principal is not None:
        return principal
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")


def require_user(user: Optional[User] = Depends(current_user)) -> User:
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return user


__all__ = ["current_user", "get_db", "require_auth", "require_user"]
