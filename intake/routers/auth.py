import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from intake.config import Settings, get_settings
from intake.database import get_db
from intake.models.user import User
from intake.schemas.user import AdminLoginRequest, LoginRequest, RegisterRequest
from intake.services.auth_service import (
    create_admin_token,
    get_password_hash,
    is_admin_credential,
    verify_password,
)
from intake.utils.errors import InvalidCredentialsError, ValidationError
from intake.utils.response import create_response, handle_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])

MIN_PASSWORD_LENGTH = 8

MISSING_FIELDS_MESSAGE = "အချက်အလက်အားလုံး ဖြည့်စွက်ပါ"
SHORT_PASSWORD_MESSAGE = "စကားဝှက်သည် အနည်းဆုံး စာလုံး ၈ လုံး ရှိရပါမည်"
DUPLICATE_PHONE_MESSAGE = "ဤဖုန်းနံပါတ်ဖြင့် အကောင့်ရှိပြီးသားပါ"
INVALID_LOGIN_MESSAGE = "ဖုန်းနံပါတ် သို့မဟုတ် စကားဝှက် မှားယွင်းနေပါသည်"


def _admin_payload(config: Settings) -> dict:
    return {
        "isAdmin": True,
        "access_token": create_admin_token(config),
        "token_type": "bearer",
    }


@router.post("/register")
def register(body: RegisterRequest, db: Session = Depends(get_db)):
    try:
        name = (body.name or "").strip()
        phone = (body.phone or "").strip()
        password = body.password or ""

        if not name or not phone or not password:
            raise ValidationError(MISSING_FIELDS_MESSAGE)
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(SHORT_PASSWORD_MESSAGE)
        if db.query(User).filter(User.phone == phone).first():
            raise ValidationError(DUPLICATE_PHONE_MESSAGE)

        user = User(name=name, phone=phone, password=get_password_hash(password))
        db.add(user)
        try:
            db.commit()
        except IntegrityError as exc:
            # Lost a race against a concurrent registration
            db.rollback()
            raise ValidationError(DUPLICATE_PHONE_MESSAGE) from exc
        db.refresh(user)

        logger.info("Registered user id=%s", user.id)
        return create_response(
            message="Register successful",
            data={"id": user.id},
            status_code=status.HTTP_201_CREATED,
        )
    except Exception as exc:
        return handle_exception(exc, "Register error")


@router.post("/login")
def login(
    body: LoginRequest,
    db: Session = Depends(get_db),
    config: Settings = Depends(get_settings),
):
    try:
        if is_admin_credential(body.phone, body.password, config):
            logger.info("Administrator logged in")
            return create_response(
                message="Admin login successful",
                data=_admin_payload(config),
                status_code=status.HTTP_200_OK,
            )

        if not body.phone or not body.password:
            raise InvalidCredentialsError(INVALID_LOGIN_MESSAGE)

        user = db.query(User).filter(User.phone == body.phone.strip()).first()
        if not user or not verify_password(body.password, user.password):
            logger.info("Failed login attempt")
            raise InvalidCredentialsError(INVALID_LOGIN_MESSAGE)

        return create_response(
            message="Login successful",
            data={"isAdmin": False, "user": {"id": user.id}},
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "Server error")


@router.post("/admin-login")
def admin_login(body: AdminLoginRequest, config: Settings = Depends(get_settings)):
    try:
        if not is_admin_credential(body.username, body.password, config):
            raise InvalidCredentialsError("Invalid admin credentials")
        return create_response(
            message="Admin login successful",
            data=_admin_payload(config),
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc)
