from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# Fields are optional so missing values reach the route and get the
# localized 400 message instead of a generic 422.
class RegisterRequest(BaseModel):
    name: str | None = None
    phone: str | None = None
    password: str | None = None


class LoginRequest(BaseModel):
    phone: str | None = None
    password: str | None = None


class AdminLoginRequest(BaseModel):
    username: str | None = None
    password: str | None = None


class UserResponse(BaseModel):
    id: int
    name: str
    phone: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)
