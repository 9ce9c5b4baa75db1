"""Error taxonomy shared by the routes.

Every error is an ``HTTPException`` with a fixed status code so
``handle_exception`` can turn it into the common response envelope.
"""

from fastapi import HTTPException, status


class IntakeError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"

    def __init__(self, detail: str | None = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)


class ValidationError(IntakeError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input"


class MissingFileError(ValidationError):
    default_detail = "ဖိုင်များအားလုံး တင်ပေးရန် လိုအပ်ပါသည်"


class InvalidCredentialsError(IntakeError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid credentials"


class NotFoundError(IntakeError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class PersistenceError(IntakeError):
    default_detail = "Database error"


class StorageError(IntakeError):
    default_detail = "File storage error"
