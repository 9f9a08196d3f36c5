import datetime
import re
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Type, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic_core import PydanticCustomError

from errors import RecordValidationError

EMAIL_PATTERN = re.compile(r"\w+(?:[.-]\w+)*@\w+(?:[.-]\w+)*(?:\.\w{2,3})+", re.ASCII)

FIELD_LABELS = {
    "name": "Name",
    "email": "Email",
    "message": "Message",
    "qualification": "Qualification",
    "specialization": "Specialization",
    "resume_url": "Resume URL",
}


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def _required_text(value: Any, field_name: str) -> str:
    label = FIELD_LABELS[field_name]
    if value is None or (isinstance(value, str) and not value.strip()):
        raise PydanticCustomError("required", "{label} is required", {"label": label})
    if not isinstance(value, str):
        raise PydanticCustomError("text_type", "{label} must be text", {"label": label})
    return value


class Record(BaseModel):
    """Fields shared by every stored submission."""

    model_config = ConfigDict(populate_by_name=True, validate_default=True)

    collection: ClassVar[str]

    id: Optional[str] = Field(default=None, alias="_id")
    name: Optional[str] = None
    email: Optional[str] = None
    created_at: datetime.datetime = Field(default_factory=_utcnow, alias="createdAt")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        # ObjectId coming back from Mongo
        return None if value is None else str(value)

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, value: Any) -> str:
        return _required_text(value, "name")

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, value: Any) -> str:
        value = _required_text(value, "email")
        if not EMAIL_PATTERN.fullmatch(value):
            raise PydanticCustomError("email_pattern", "Please enter a valid email address")
        return value

    def to_document(self) -> Dict[str, Any]:
        """Mongo document for insertion; the id is assigned by the store."""
        return self.model_dump(by_alias=True, exclude={"id"})

    def to_public(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Contact(Record):
    collection: ClassVar[str] = "contacts"

    message: Optional[str] = None

    @field_validator("message", mode="before")
    @classmethod
    def _check_message(cls, value: Any) -> str:
        return _required_text(value, "message")


class Application(Record):
    collection: ClassVar[str] = "applications"

    qualification: Optional[str] = None
    specialization: Optional[str] = None
    resume_url: Optional[str] = Field(default=None, alias="resumeUrl")

    @field_validator("qualification", "specialization", "resume_url", mode="before")
    @classmethod
    def _check_text(cls, value: Any, info: ValidationInfo) -> str:
        return _required_text(value, info.field_name)


R = TypeVar("R", bound=Record)


def build_record(record_type: Type[R], fields: Mapping[str, Any]) -> R:
    """Validate submitted fields into a record, collecting every violation."""
    try:
        return record_type.model_validate(dict(fields))
    except ValidationError as exc:
        messages: List[str] = [error["msg"] for error in exc.errors()]
        raise RecordValidationError(messages) from exc


class Envelope(BaseModel):
    success: bool
    message: Optional[str] = None
    data: Optional[Any] = None

    def to_content(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
