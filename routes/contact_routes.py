from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from database import RecordStore, get_store
from errors import SubmissionError
from logger import get_logger
from middleware import envelope_response, error_response
from models import Contact

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Contact"])

CONTACT_FIELDS = ("name", "email", "message")
CONTACT_RECEIVED = "Thank you! We will connect shortly."
CONTACT_FAILED = "Error submitting form. Please try again."


@router.post("/contact", status_code=201)
def submit_contact_form(
    form: Optional[Dict[str, Any]] = Body(default=None),
    store: RecordStore = Depends(get_store),
):
    submitted = form or {}
    try:
        store.save(Contact, {key: submitted.get(key) for key in CONTACT_FIELDS})
    except SubmissionError as exc:
        logger.warning("Error saving contact: %s", exc)
        return error_response(exc, fallback=CONTACT_FAILED)
    except Exception:
        logger.exception("Error saving contact")
        return envelope_response(500, CONTACT_FAILED)

    return envelope_response(201, CONTACT_RECEIVED)
