import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from app.core.constants import SUBMIT_ERROR_MESSAGE, SUBMIT_SUCCESS_MESSAGE, SubmitStatusEnum
from app.schemas.school import FieldError, ImageUpload, SchoolForm, SchoolFormInvalid, validate_school_form
from app.services.school_api import FilePart, SchoolAPIService

logger = logging.getLogger(__name__)


def build_multipart_payload(form: SchoolForm) -> Tuple[Dict[str, str], Dict[str, FilePart]]:
    """Split a validated form into multipart text fields and the image file part."""
    files: Dict[str, FilePart] = {
        "image": (form.image.filename, form.image.content, form.image.content_type)
    }
    return form.text_fields(), files


class SubmissionFlow:
    """State of one add-school form: idle -> submitting -> success | error.

    Only ``submit`` and the two outcome events move the status. A second
    ``submit`` while one is in flight is ignored, and so is any outcome that
    arrives after ``close``.
    """

    def __init__(self, api: SchoolAPIService):
        self.api = api
        self.status = SubmitStatusEnum.IDLE
        self.message: Optional[str] = None
        self.values: Dict[str, Any] = {}
        self.files: List[ImageUpload] = []
        self.field_errors: Dict[str, List[FieldError]] = {}
        self.closed = False

    @property
    def can_submit(self) -> bool:
        return not self.closed and self.status != SubmitStatusEnum.SUBMITTING

    def update(self, **values: Any) -> None:
        self.values.update(values)

    def select_files(self, files: Sequence[ImageUpload]) -> None:
        self.files = list(files)

    def reset(self) -> None:
        self.values = {}
        self.files = []
        self.field_errors = {}

    def close(self) -> None:
        self.closed = True

    async def submit(self) -> SubmitStatusEnum:
        if not self.can_submit:
            logger.debug("Ignoring submit: form is closed or already submitting")
            return self.status

        try:
            form = validate_school_form(self.values, self.files)
        except SchoolFormInvalid as exc:
            self.field_errors = exc.errors
            self.status = SubmitStatusEnum.IDLE
            self.message = None
            return self.status

        self.field_errors = {}
        self.status = SubmitStatusEnum.SUBMITTING
        self.message = None

        data, files = build_multipart_payload(form)
        try:
            await self.api.create_school(data, files)
        except Exception as exc:
            self.submit_failed(exc)
        else:
            self.submit_succeeded()
        return self.status

    def submit_succeeded(self) -> None:
        if self.closed:
            logger.debug("Dropping submit result for a closed form")
            return
        self.reset()
        self.status = SubmitStatusEnum.SUCCESS
        self.message = SUBMIT_SUCCESS_MESSAGE

    def submit_failed(self, exc: Exception) -> None:
        logger.error(f"School submission failed: {getattr(exc, 'detail', exc)}")
        if self.closed:
            return
        self.status = SubmitStatusEnum.ERROR
        self.message = SUBMIT_ERROR_MESSAGE
