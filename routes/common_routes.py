from fastapi import APIRouter

from middleware import envelope_response

router = APIRouter()


@router.get("/")
def read_root():
    return envelope_response(200, "Applicant intake API is running")
