import logging

from fastapi import APIRouter, Depends, File, Form as FormField, Request, UploadFile, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from intake.config import Settings, get_settings
from intake.database import get_db
from intake.models.form import Form
from intake.models.user import User
from intake.schemas.form import FILE_FIELDS, SCALAR_FIELDS, serialize_form
from intake.services.storage_service import build_file_url, discard_files, save_upload
from intake.utils.errors import MissingFileError, NotFoundError, PersistenceError, ValidationError
from intake.utils.response import create_response, handle_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Forms"])

MISSING_FIELDS_MESSAGE = "အချက်အလက်အားလုံး ဖြည့်စွက်ပါ"
INVALID_AGE_MESSAGE = "အသက်ကို ဂဏန်းဖြင့် ဖြည့်ပါ"
UNKNOWN_USER_MESSAGE = "အသုံးပြုသူ ရှာမတွေ့ပါ"
ALREADY_SUBMITTED_MESSAGE = "ဤအကောင့်ဖြင့် ဖောင်တင်ပြီးသားပါ"
FORM_NOT_FOUND_MESSAGE = "Form not found"


def _parse_age(value: str) -> int:
    try:
        age = int(value.strip())
    except (AttributeError, ValueError):
        raise ValidationError(INVALID_AGE_MESSAGE)
    if age < 0:
        raise ValidationError(INVALID_AGE_MESSAGE)
    return age


def _parse_user_id(value: str | None) -> int:
    try:
        return int((value or "").strip())
    except ValueError:
        raise ValidationError(UNKNOWN_USER_MESSAGE)


def _clean_scalars(values: dict, partial: bool) -> dict:
    """Trim the submitted scalar fields and coerce ``age``.

    With ``partial`` unset every field is required; otherwise absent fields
    are skipped, but a present field may not be blank.
    """
    cleaned = {}
    for field in SCALAR_FIELDS:
        raw = values.get(field)
        if raw is None:
            if partial:
                continue
            raise ValidationError(MISSING_FIELDS_MESSAGE)
        text = raw.strip()
        if not text:
            raise ValidationError(MISSING_FIELDS_MESSAGE)
        cleaned[field] = _parse_age(text) if field == "age" else text
    return cleaned


@router.post("/submit-form")
async def submit_form(
    user_id: str | None = FormField(None, alias="userId"),
    full_name: str | None = FormField(None, alias="fullName"),
    age: str | None = FormField(None),
    education: str | None = FormField(None),
    address: str | None = FormField(None),
    father_name: str | None = FormField(None, alias="fatherName"),
    mother_name: str | None = FormField(None, alias="motherName"),
    nrc_file: UploadFile | None = File(None, alias="nrcFile"),
    household_file: UploadFile | None = File(None, alias="householdFile"),
    db: Session = Depends(get_db),
    config: Settings = Depends(get_settings),
):
    try:
        if not nrc_file or not household_file:
            raise MissingFileError()

        fields = _clean_scalars(
            {
                "full_name": full_name,
                "age": age,
                "education": education,
                "address": address,
                "father_name": father_name,
                "mother_name": mother_name,
            },
            partial=False,
        )

        owner_id = _parse_user_id(user_id)
        if not db.query(User).filter(User.id == owner_id).first():
            raise ValidationError(UNKNOWN_USER_MESSAGE)
        if db.query(Form).filter(Form.user_id == owner_id).first():
            raise ValidationError(ALREADY_SUBMITTED_MESSAGE)

        stored = []
        try:
            stored.append(await save_upload(nrc_file, config))
            stored.append(await save_upload(household_file, config))

            form = Form(user_id=owner_id, nrc_file=stored[0], household_file=stored[1], **fields)
            db.add(form)
            db.commit()
        except Exception as exc:
            db.rollback()
            discard_files(stored, config)
            if isinstance(exc, IntegrityError):
                raise ValidationError(ALREADY_SUBMITTED_MESSAGE) from exc
            if isinstance(exc, SQLAlchemyError):
                logger.error("Form insert failed for user_id=%s: %s", owner_id, exc)
                raise PersistenceError("Form submission failed") from exc
            raise

        logger.info("Form submitted for user_id=%s", owner_id)
        return create_response(
            message="Form submitted successfully",
            data=None,
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "Form submission failed")


@router.get("/api/check-form/{user_id}")
def check_form(
    user_id: str,
    request: Request,
    db: Session = Depends(get_db),
    config: Settings = Depends(get_settings),
):
    try:
        owner_id = _parse_user_id(user_id)
        form = db.query(Form).filter(Form.user_id == owner_id).first()
        if not form:
            return create_response(
                message=FORM_NOT_FOUND_MESSAGE,
                data={"exists": False},
                status_code=status.HTTP_200_OK,
            )

        return create_response(
            message="Form found",
            data={
                "exists": True,
                "data": serialize_form(form),
                "nrcFileUrl": build_file_url(request, form.nrc_file, config),
                "householdFileUrl": build_file_url(request, form.household_file, config),
            },
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "Server error")


@router.put("/api/update-form/{user_id}")
async def update_form(
    user_id: int,
    full_name: str | None = FormField(None, alias="fullName"),
    age: str | None = FormField(None),
    education: str | None = FormField(None),
    address: str | None = FormField(None),
    father_name: str | None = FormField(None, alias="fatherName"),
    mother_name: str | None = FormField(None, alias="motherName"),
    nrc_file: UploadFile | None = File(None, alias="nrcFile"),
    household_file: UploadFile | None = File(None, alias="householdFile"),
    db: Session = Depends(get_db),
    config: Settings = Depends(get_settings),
):
    try:
        form = db.query(Form).filter(Form.user_id == user_id).first()
        if not form:
            raise NotFoundError(FORM_NOT_FOUND_MESSAGE)

        fields = _clean_scalars(
            {
                "full_name": full_name,
                "age": age,
                "education": education,
                "address": address,
                "father_name": father_name,
                "mother_name": mother_name,
            },
            partial=True,
        )
        for field, value in fields.items():
            setattr(form, field, value)

        uploads = dict(zip(FILE_FIELDS, (nrc_file, household_file)))
        written = []
        replaced = []
        try:
            for field, upload in uploads.items():
                if not upload:
                    continue
                stored_name = await save_upload(upload, config)
                written.append(stored_name)
                replaced.append(getattr(form, field))
                setattr(form, field, stored_name)
            db.commit()
            db.refresh(form)
        except Exception as exc:
            db.rollback()
            discard_files(written, config)
            if isinstance(exc, SQLAlchemyError):
                logger.error("Form update failed for user_id=%s: %s", user_id, exc)
                raise PersistenceError("Form update failed") from exc
            raise

        # Replaced files are no longer referenced by any record
        discard_files(replaced, config)

        logger.info(
            "Form updated for user_id=%s fields=%s files=%s",
            user_id,
            sorted(fields),
            len(written),
        )
        return create_response(
            message="Form updated successfully",
            data=serialize_form(form),
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "Form update failed")
