from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status

from app.core.config import settings
from app.core.constants import PAGE_SIZE_OPTIONS, ListingStatusEnum, SubmitStatusEnum
from app.schemas.response import APIResponse
from app.schemas.school import FormDescriptor, ImageUpload, SchoolFormInvalid, SchoolPage, school_form_descriptor
from app.services.listing import ListingView
from app.services.school_api import SchoolAPIService
from app.services.submission import SubmissionFlow
from app.utils import deps
from app.utils.logger import setup_logger

logger = setup_logger("school_api", "school.log")

router = APIRouter()


async def _read_uploads(uploads: Optional[List[UploadFile]]) -> List[ImageUpload]:
    files = []
    for upload in uploads or []:
        content = await upload.read()
        # An untouched file input still posts an empty, unnamed part.
        if not upload.filename and not content:
            continue
        files.append(ImageUpload.from_bytes(upload.filename or "", content, upload.content_type))
    return files


@router.get("/form", response_model=APIResponse[FormDescriptor])
def read_school_form():
    """Describe the add-school form fields and their rules."""
    return APIResponse(message="School form retrieved successfully", data=school_form_descriptor())


@router.post("/", response_model=APIResponse[None], status_code=status.HTTP_201_CREATED)
async def create_school(
    *,
    api: SchoolAPIService = Depends(deps.get_school_api),
    name: str = Form(""),
    address: str = Form(""),
    city: str = Form(""),
    state: str = Form(""),
    contact: str = Form(""),
    email_id: str = Form(""),
    image: Optional[List[UploadFile]] = File(None),
):
    """Validate the add-school form and submit it to the backend."""
    flow = SubmissionFlow(api)
    flow.update(name=name, address=address, city=city, state=state, contact=contact, email_id=email_id)
    flow.select_files(await _read_uploads(image))

    result = await flow.submit()

    if flow.field_errors:
        raise SchoolFormInvalid(flow.field_errors)
    if result == SubmitStatusEnum.ERROR:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=flow.message)

    logger.info(f"School '{name}' submitted")
    return APIResponse(message=flow.message)


@router.get("/", response_model=APIResponse[SchoolPage])
async def list_schools(
    *,
    api: SchoolAPIService = Depends(deps.get_school_api),
    search: str = "",
    page: int = 1,
    size: int = Query(settings.DEFAULT_PAGE_SIZE),
):
    """List registered schools, filtered by ``search`` and paginated."""
    if size not in PAGE_SIZE_OPTIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"size must be one of {', '.join(map(str, PAGE_SIZE_OPTIONS))}",
        )

    view = ListingView(api, page_size=size)
    if await view.activate() == ListingStatusEnum.FAILED:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=view.error)

    view.set_query(search)
    view.go_to(page)
    return APIResponse(message="Schools retrieved successfully", data=view.to_page())
