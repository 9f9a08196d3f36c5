from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from database import RecordStore, get_store
from errors import MissingFileError, SubmissionError, UploadError
from logger import get_logger
from middleware import envelope_response, error_response
from models import Application
from services.file_intake import FileIntake, get_intake, pick_resume

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Applications"])

APPLICATION_FIELDS = ("name", "email", "qualification", "specialization")
APPLICATION_RECEIVED = "Thank you for your application! We will review it shortly."
APPLICATION_FAILED = "Error submitting application. Please try again."
LISTING_FAILED = "Error fetching applications"


@router.post("/apply", status_code=201)
async def submit_application(
    request: Request,
    store: RecordStore = Depends(get_store),
    intake: FileIntake = Depends(get_intake),
):
    try:
        form = await request.form()
    except (StarletteHTTPException, MultiPartException) as exc:
        raise UploadError(f"unreadable multipart body: {exc}") from exc

    try:
        # Upload errors propagate to ErrorEnvelopeMiddleware.
        resume = pick_resume(form)
        if resume is None:
            return error_response(MissingFileError())

        stored = await intake.accept(resume)
        fields = {key: form.get(key) for key in APPLICATION_FIELDS}
        fields["resume_url"] = str(request.url_for("uploads", path=stored.filename))

        try:
            await run_in_threadpool(store.save, Application, fields)
        except SubmissionError as exc:
            intake.discard(stored)
            logger.warning("Error saving application: %s", exc)
            return error_response(exc, fallback=APPLICATION_FAILED)
        except Exception:
            intake.discard(stored)
            logger.exception("Error saving application")
            return envelope_response(500, APPLICATION_FAILED)
    finally:
        await form.close()

    return envelope_response(201, APPLICATION_RECEIVED)


@router.get("/applications")
def list_applications(store: RecordStore = Depends(get_store)):
    try:
        applications = store.list_applications()
    except Exception:
        logger.exception("Error fetching applications")
        return envelope_response(500, LISTING_FAILED)

    return envelope_response(200, data=[application.to_public() for application in applications])
