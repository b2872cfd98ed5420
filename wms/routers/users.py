from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from wms.core.exceptions import NotFound
from wms.dependencies import get_db, require_auth
from wms.schemas.user import UserRead, UserUpdate
from wms.services.user_service import user_store

router = APIRouter(prefix="/api/users", tags=["Users"], dependencies=[Depends(require_auth)])


@router.get("", response_model=list[UserRead])
def list_users(db: Session = Depends(get_db)):
    return user_store(db).list_all()


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: int, db: Session = Depends(get_db)):
    user = user_store(db).get(user_id)
    if user is None:
        raise NotFound("User", user_id)
    return user


@router.put("/{user_id}", response_model=UserRead)
def update_user(user_id: int, payload: UserUpdate, db: Session = Depends(get_db)):
    user = user_store(db).update(user_id, payload.model_dump(exclude_unset=True))
    if user is None:
        raise NotFound("User", user_id)
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, db: Session = Depends(get_db)):
    if not user_store(db).delete(user_id):
        raise NotFound("User", user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
