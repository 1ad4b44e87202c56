import re
from typing import Any, Dict, List, Mapping, Optional, Sequence
from pydantic import BaseModel, ConfigDict, Field, ValidationError, computed_field, field_validator
from pydantic_core import PydanticCustomError

from app.core.config import settings
from app.schemas.response import PaginatedResponse
from app.core.constants import (
    ALLOWED_IMAGE_TYPES,
    CONTACT_PATTERN,
    EMAIL_PATTERN,
    MAX_IMAGE_BYTES,
    ErrorKindEnum,
)

NAME_MESSAGE = "School name must be at least 3 characters"
ADDRESS_MESSAGE = "Address is too short"
CITY_MESSAGE = "City name is required"
STATE_MESSAGE = "State name is required"
CONTACT_MESSAGE = "Contact must be a 10-digit number"
EMAIL_MESSAGE = "Invalid email address"
IMAGE_REQUIRED_MESSAGE = "School image is required."
IMAGE_TOO_LARGE_MESSAGE = "Max image size is 100KB."
IMAGE_TYPE_MESSAGE = "Only .jpeg ,.jpg and .png formats are supported."

TEXT_FIELDS = ("name", "address", "city", "state", "contact", "email_id")


class SchoolBase(BaseModel):
    name: str
    address: str
    city: str
    state: str
    email_id: str

class School(SchoolBase):
    """A registered school, as listed by the backend."""
    id: int
    contact: int
    image: str
    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def image_url(self) -> str:
        return f"{settings.BACKEND_URL}/schoolImages/{self.image}"


class ImageUpload(BaseModel):
    """A file picked in the form's image input."""
    filename: str
    content_type: Optional[str] = None
    size: int = Field(..., ge=0)
    content: bytes = b""

    @classmethod
    def from_bytes(cls, filename: str, content: bytes, content_type: Optional[str] = None) -> "ImageUpload":
        return cls(filename=filename, content_type=content_type, size=len(content), content=content)


class FieldError(BaseModel):
    kind: ErrorKindEnum
    message: str


class SchoolFormInvalid(ValueError):
    """Raised when a submitted school form breaks one or more field rules."""

    def __init__(self, errors: Dict[str, List[FieldError]]):
        self.errors = errors
        super().__init__(f"Invalid school form fields: {', '.join(errors)}")

    def to_dict(self) -> Dict[str, List[Dict[str, str]]]:
        return {
            field: [error.model_dump(mode="json") for error in field_errors]
            for field, field_errors in self.errors.items()
        }


def _at_least(value: str, length: int, message: str) -> str:
    if len(value) < length:
        raise PydanticCustomError(ErrorKindEnum.TOO_SHORT.value, message, {"min_length": length})
    return value

def _matching(value: str, pattern: str, message: str) -> str:
    if re.fullmatch(pattern, value, flags=re.ASCII) is None:
        raise PydanticCustomError(ErrorKindEnum.PATTERN_MISMATCH.value, message, {"pattern": pattern})
    return value


class SchoolFormFields(BaseModel):
    """Text inputs of the add-school form.

    Untouched inputs arrive as empty strings, so a missing field fails its
    own length or pattern rule instead of a generic "required" error.
    """
    name: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    contact: str = ""
    email_id: str = ""

    @field_validator(*TEXT_FIELDS, mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        return _at_least(value, 3, NAME_MESSAGE)

    @field_validator("address")
    @classmethod
    def _check_address(cls, value: str) -> str:
        return _at_least(value, 5, ADDRESS_MESSAGE)

    @field_validator("city")
    @classmethod
    def _check_city(cls, value: str) -> str:
        return _at_least(value, 2, CITY_MESSAGE)

    @field_validator("state")
    @classmethod
    def _check_state(cls, value: str) -> str:
        return _at_least(value, 2, STATE_MESSAGE)

    @field_validator("contact")
    @classmethod
    def _check_contact(cls, value: str) -> str:
        return _matching(value, CONTACT_PATTERN, CONTACT_MESSAGE)

    @field_validator("email_id")
    @classmethod
    def _check_email(cls, value: str) -> str:
        return _matching(value, EMAIL_PATTERN, EMAIL_MESSAGE)


class SchoolForm(SchoolFormFields):
    """A fully validated school form, ready to be submitted."""
    image: ImageUpload

    def text_fields(self) -> Dict[str, str]:
        return {field: getattr(self, field) for field in TEXT_FIELDS}


def check_image(files: Sequence[ImageUpload]) -> List[FieldError]:
    """Apply the image rules independently and return every one that fails."""
    issues: List[FieldError] = []
    first = files[0] if files else None

    if len(files) != 1:
        issues.append(FieldError(kind=ErrorKindEnum.MISSING_FILE, message=IMAGE_REQUIRED_MESSAGE))
    if first is None or first.size > MAX_IMAGE_BYTES:
        issues.append(FieldError(kind=ErrorKindEnum.TOO_LARGE, message=IMAGE_TOO_LARGE_MESSAGE))
    if first is None or first.content_type not in ALLOWED_IMAGE_TYPES:
        issues.append(FieldError(kind=ErrorKindEnum.UNSUPPORTED_TYPE, message=IMAGE_TYPE_MESSAGE))

    return issues


def validate_school_form(data: Mapping[str, Any], files: Sequence[ImageUpload]) -> SchoolForm:
    """Validate the form's text inputs and selected files together.

    Returns the validated ``SchoolForm`` or raises ``SchoolFormInvalid``
    with every failing rule, keyed by field name.
    """
    errors: Dict[str, List[FieldError]] = {}
    fields: Optional[SchoolFormFields] = None

    try:
        fields = SchoolFormFields.model_validate({key: data.get(key) for key in TEXT_FIELDS})
    except ValidationError as exc:
        for err in exc.errors():
            field = str(err["loc"][0])
            errors.setdefault(field, []).append(
                FieldError(kind=ErrorKindEnum(err["type"]), message=err["msg"])
            )

    image_issues = check_image(files)
    if image_issues:
        errors["image"] = image_issues

    if errors:
        raise SchoolFormInvalid(errors)

    return SchoolForm(**fields.model_dump(), image=files[0])


class FormField(BaseModel):
    name: str
    label: str
    type: str
    required: bool = True
    min_length: Optional[int] = None
    pattern: Optional[str] = None
    accept: Optional[List[str]] = None
    max_bytes: Optional[int] = None
    messages: List[str]

class FormDescriptor(BaseModel):
    model: str
    fields: List[FormField]


def school_form_descriptor() -> FormDescriptor:
    """Describe the add-school form so a client can render and pre-check it."""
    return FormDescriptor(
        model="School",
        fields=[
            FormField(name="name", label="School Name", type="text", min_length=3, messages=[NAME_MESSAGE]),
            FormField(name="contact", label="Contact Number", type="tel", pattern=CONTACT_PATTERN, messages=[CONTACT_MESSAGE]),
            FormField(name="address", label="Address", type="text", min_length=5, messages=[ADDRESS_MESSAGE]),
            FormField(name="city", label="City", type="text", min_length=2, messages=[CITY_MESSAGE]),
            FormField(name="state", label="State", type="text", min_length=2, messages=[STATE_MESSAGE]),
            FormField(name="email_id", label="Email ID", type="email", pattern=EMAIL_PATTERN, messages=[EMAIL_MESSAGE]),
            FormField(
                name="image",
                label="School Image",
                type="file",
                accept=list(ALLOWED_IMAGE_TYPES),
                max_bytes=MAX_IMAGE_BYTES,
                messages=[IMAGE_REQUIRED_MESSAGE, IMAGE_TOO_LARGE_MESSAGE, IMAGE_TYPE_MESSAGE],
            ),
        ],
    )


class SchoolPage(PaginatedResponse[School]):
    query: str = ""
    empty_message: Optional[str] = None
