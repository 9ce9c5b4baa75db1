import os
from pathlib import Path
from dotenv import load_dotenv
from fastapi.security import HTTPBearer

BASE_DIR = Path(__file__).resolve().parent.parent  # -> project root

# Load .env explicitly from project root
load_dotenv(BASE_DIR / ".env")


class Settings:
    """Process-wide configuration, read once from the environment.

    Attributes are frozen after construction; workflows receive the instance
    through ``get_settings`` instead of reading ``os.environ`` per request.
    """

    PROJECT_NAME = "Form Intake"

    def __init__(self):
        self.DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./intake.db")

        self.ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "")
        self.ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")

        self.JWT_SECRET = os.getenv("JWT_SECRET", "change_this")
        self.ALGORITHM = os.getenv("ALGORITHM", "HS256")
        self.ADMIN_TOKEN_EXPIRE_MINUTES = int(os.getenv("ADMIN_TOKEN_EXPIRE_MINUTES", 60))

        upload_dir = Path(os.getenv("UPLOAD_DIR", "uploads"))
        if not upload_dir.is_absolute():
            upload_dir = BASE_DIR / upload_dir
        self.UPLOAD_DIR = upload_dir
        self.UPLOAD_URL_PREFIX = "/uploads"
        self.MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", 5 * 1024 * 1024))

        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.cors_origins = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ]
        self.bearer_scheme = HTTPBearer()
        self._frozen = True

    def __setattr__(self, name, value):
        if getattr(self, "_frozen", False):
            raise AttributeError(f"Settings are read-only ({name})")
        super().__setattr__(name, value)


settings = Settings()


def get_settings() -> Settings:
    return settings
