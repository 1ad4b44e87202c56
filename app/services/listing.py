import logging
import math
from typing import List, Optional, Sequence

from fastapi import HTTPException

from app.core.config import settings
from app.core.constants import NO_RESULTS_MESSAGE, PAGE_SIZE_OPTIONS, ListingStatusEnum
from app.schemas.school import School, SchoolPage
from app.services.school_api import SchoolAPIService

logger = logging.getLogger(__name__)


def filter_schools(records: Sequence[School], query: str) -> List[School]:
    """Schools whose name, city, state, email or contact contain ``query``.

    Text fields match case-insensitively; the contact matches against its
    decimal digits. An empty query keeps every school in its original order.
    """
    if not query:
        return list(records)

    needle = query.lower()
    return [
        school for school in records
        if needle in school.name.lower()
        or needle in school.city.lower()
        or needle in school.state.lower()
        or needle in school.email_id.lower()
        or query in str(school.contact)
    ]


def page_count(count: int, size: int) -> int:
    return max(1, math.ceil(count / size))


def paginate(records: Sequence[School], page: int, size: int) -> List[School]:
    start = (max(page, 1) - 1) * size
    return list(records[start:start + size])


class ListingView:
    """State of the show-schools page: loading -> loaded | failed.

    The filtered list, page count and visible slice are derived from
    ``records``, ``query``, ``page`` and ``page_size`` on every access.
    """

    def __init__(self, api: SchoolAPIService, page_size: Optional[int] = None):
        self.api = api
        self.status = ListingStatusEnum.LOADING
        self.records: List[School] = []
        self.error: Optional[str] = None
        self.query = ""
        self.page = 1
        self.page_size = settings.DEFAULT_PAGE_SIZE
        self.active = True
        self._activated = False
        if page_size is not None:
            self.set_page_size(page_size)

    async def activate(self) -> ListingStatusEnum:
        if self._activated:
            return self.status
        self._activated = True

        try:
            records = await self.api.list_schools()
        except HTTPException as exc:
            self.fetch_failed(str(exc.detail))
        except Exception as exc:
            logger.error(f"Unexpected error fetching schools: {exc}", exc_info=True)
            self.fetch_failed(str(exc) or "An unknown error occurred")
        else:
            self.fetch_succeeded(records)
        return self.status

    def deactivate(self) -> None:
        self.active = False

    def fetch_succeeded(self, records: Sequence[School]) -> None:
        if not self.active:
            logger.debug("Dropping school list for an inactive view")
            return
        self.records = list(records)
        self.error = None
        self.status = ListingStatusEnum.LOADED
        self._clamp_page()

    def fetch_failed(self, reason: str) -> None:
        logger.warning(f"Fetching schools failed: {reason}")
        if not self.active:
            return
        self.records = []
        self.error = reason
        self.status = ListingStatusEnum.FAILED
        self.page = 1

    def set_query(self, query: Optional[str]) -> None:
        self.query = query or ""
        self.page = 1

    def set_page_size(self, size: int) -> None:
        if size not in PAGE_SIZE_OPTIONS:
            raise ValueError(f"Page size must be one of {', '.join(map(str, PAGE_SIZE_OPTIONS))}")
        self.page_size = size
        self._clamp_page()

    def go_to(self, page: int) -> None:
        self.page = page
        self._clamp_page()

    def next_page(self) -> None:
        self.page = min(self.page + 1, self.total_pages)

    def previous_page(self) -> None:
        self.page = max(self.page - 1, 1)

    def _clamp_page(self) -> None:
        self.page = min(max(self.page, 1), self.total_pages)

    @property
    def filtered(self) -> List[School]:
        return filter_schools(self.records, self.query)

    @property
    def total_pages(self) -> int:
        return page_count(len(self.filtered), self.page_size)

    @property
    def visible(self) -> List[School]:
        if self.status != ListingStatusEnum.LOADED:
            return []
        return paginate(self.filtered, self.page, self.page_size)

    def to_page(self) -> SchoolPage:
        if self.status != ListingStatusEnum.LOADED:
            raise RuntimeError(f"School list is not loaded (status: {self.status.value})")

        filtered = self.filtered
        pages = page_count(len(filtered), self.page_size)
        items = paginate(filtered, self.page, self.page_size)
        return SchoolPage(
            items=items,
            total=len(filtered),
            page=self.page,
            size=self.page_size,
            pages=pages,
            has_next=self.page < pages,
            has_previous=self.page > 1,
            query=self.query,
            empty_message=None if items else NO_RESULTS_MESSAGE,
        )
