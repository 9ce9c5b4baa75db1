import logging

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from intake.config import settings
from intake.database import init_db
from intake.routers import admin, auth, forms, users
from intake.services.storage_service import ensure_upload_dir
from intake.utils.response import create_response, handle_exception

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.PROJECT_NAME)

# CORS for the browser form and admin pages
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    init_db()
    logger.info("Database ready, uploads in %s", settings.UPLOAD_DIR)


# Add routes
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(forms.router)
app.include_router(admin.router)

# Serve uploaded files
app.mount(
    settings.UPLOAD_URL_PREFIX,
    StaticFiles(directory=ensure_upload_dir(settings)),
    name="uploads",
)


@app.get("/")
def home():
    try:
        return create_response(
            message="Form intake API running",
            data={"service": "form-intake"},
            status_code=status.HTTP_200_OK
        )
    except Exception as exc:
        return handle_exception(exc)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("intake.main:app", host="0.0.0.0", port=5000)
