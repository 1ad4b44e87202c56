from enum import Enum


MAX_IMAGE_BYTES = 100_000
ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/jpg")
PAGE_SIZE_OPTIONS = (10, 20, 30)

CONTACT_PATTERN = r"^[0-9]{10}$"
EMAIL_PATTERN = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

SUBMIT_SUCCESS_MESSAGE = "School added successfully!"
SUBMIT_ERROR_MESSAGE = "An error occurred. Please try again."
NO_RESULTS_MESSAGE = "No schools found matching your search."

class ErrorKindEnum(str, Enum):
    TOO_SHORT = "too_short"
    PATTERN_MISMATCH = "pattern_mismatch"
    MISSING_FILE = "missing_file"
    TOO_LARGE = "too_large"
    UNSUPPORTED_TYPE = "unsupported_type"

class SubmitStatusEnum(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    ERROR = "error"

class ListingStatusEnum(str, Enum):
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"
