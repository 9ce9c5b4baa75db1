from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

SCALAR_FIELDS = ("full_name", "age", "education", "address", "father_name", "mother_name")
FILE_FIELDS = ("nrc_file", "household_file")


class FormResponse(BaseModel):
    id: int
    user_id: int
    full_name: str
    age: int
    education: str
    address: str
    father_name: str
    mother_name: str
    nrc_file: str
    household_file: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


def serialize_form(form) -> dict:
    return FormResponse.model_validate(form).model_dump(by_alias=True)
