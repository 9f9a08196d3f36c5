import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from config import ConfigError, Settings
from database import MongoRecordStore, RecordStore
from logger import get_logger
from middleware import install_error_handling
from routes import application_routes, common_routes, contact_routes
from services.file_intake import FileIntake

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None, store: Optional[RecordStore] = None) -> FastAPI:
    """
    Build the API. Without an explicit store, the lifespan connects to
    MongoDB using settings.mongodb_uri and refuses to start if it can't.
    """
    settings = settings or Settings.from_env()
    intake = FileIntake(settings.upload_dir)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        settings.validate(require_database=store is None)
        intake.ensure_directory()
        app.state.store = store if store is not None else MongoRecordStore.connect(settings.mongodb_uri)
        try:
            app.state.store.open()
            yield
        finally:
            app.state.store.close()

    app = FastAPI(title="Applicant Intake API", lifespan=lifespan)
    app.state.settings = settings
    app.state.intake = intake

    install_error_handling(app)
    # Added last so it wraps the error envelopes too.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(common_routes.router)
    app.include_router(contact_routes.router)
    app.include_router(application_routes.router)
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    try:
        app.state.settings.validate()
    except ConfigError as exc:
        logger.error("%s", exc)
        sys.exit(1)

    uvicorn.run(app, host="0.0.0.0", port=app.state.settings.port)
