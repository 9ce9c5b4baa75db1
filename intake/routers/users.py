from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from intake.database import get_db
from intake.models.user import User
from intake.schemas.user import UserResponse
from intake.utils.errors import NotFoundError
from intake.utils.response import create_response, handle_exception

router = APIRouter(prefix="/api/user", tags=["Users"])


@router.get("/{user_id}")
def get_user(user_id: int, db: Session = Depends(get_db)):
    try:
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("အသုံးပြုသူ ရှာမတွေ့ပါ")
        return create_response(
            message="User fetched successfully",
            data=UserResponse.model_validate(user).model_dump(by_alias=True),
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "Server error")
