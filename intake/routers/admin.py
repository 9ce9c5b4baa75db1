import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from intake.config import Settings, get_settings
from intake.database import get_db
from intake.models.form import Form
from intake.schemas.form import serialize_form
from intake.services.auth_middleware import get_current_admin
from intake.services.storage_service import discard_files
from intake.utils.errors import NotFoundError
from intake.utils.response import create_response, handle_exception

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(get_current_admin)],
)


@router.get("/forms")
def list_forms(db: Session = Depends(get_db)):
    try:
        forms = db.query(Form).order_by(Form.created_at.desc(), Form.id.desc()).all()
        payload = [serialize_form(form) for form in forms]
        return create_response(
            message="Forms fetched successfully",
            data=payload,
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "Failed to fetch forms")


@router.get("/form/{form_id}")
def get_form(form_id: int, db: Session = Depends(get_db)):
    try:
        form = db.query(Form).filter(Form.id == form_id).first()
        if not form:
            raise NotFoundError("Data not found")
        return create_response(
            message="Form fetched successfully",
            data=serialize_form(form),
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "Error fetching form")


@router.delete("/form/{form_id}")
def delete_form(
    form_id: int,
    db: Session = Depends(get_db),
    config: Settings = Depends(get_settings),
):
    try:
        form = db.query(Form).filter(Form.id == form_id).first()
        if not form:
            raise NotFoundError("Form not found")

        stored_files = [form.nrc_file, form.household_file]
        db.delete(form)
        db.commit()

        # Record is gone; missing files are tolerated
        discard_files(stored_files, config)

        logger.info("Deleted form id=%s", form_id)
        return create_response(
            message="Data deleted successfully",
            data={"id": form_id},
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "Delete failed")
