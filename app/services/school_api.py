import httpx
import logging
from typing import Any, Dict, List, Optional, Tuple
from fastapi import HTTPException, status
from pydantic import TypeAdapter, ValidationError

from app.core.config import settings
from app.schemas.school import School

logger = logging.getLogger(__name__)

FilePart = Tuple[str, bytes, Optional[str]]

_school_list = TypeAdapter(List[School])

class SchoolAPIService:
    """Client for the school backend (`/create` and `/schools`)."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.BACKEND_URL).rstrip("/")
        self.timeout = settings.REQUEST_TIMEOUT if timeout is None else timeout
        self.transport = transport

    async def _make_request(self, method: str, path: str, failure_detail: str, **kwargs) -> Any:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            url = f"{self.base_url}{path}"

            try:
                response = await client.request(method, url, **kwargs)
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                logger.warning(f"{method} {url} returned {e.response.status_code}: {e.response.text}")
                raise HTTPException(status_code=e.response.status_code, detail=failure_detail)
            except httpx.RequestError as e:
                logger.warning(f"{method} {url} failed: {e!r}")
                raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=f"Network error: {e}")

            try:
                return response.json()
            except ValueError:
                raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"{failure_detail}: invalid JSON response")

    async def create_school(self, data: Dict[str, str], files: Dict[str, FilePart]) -> Any:
        return await self._make_request("POST", "/create", "Failed to add school", data=data, files=files)

    async def list_schools(self) -> List[School]:
        payload = await self._make_request("GET", "/schools", "Failed to fetch schools")
        try:
            return _school_list.validate_python(payload)
        except ValidationError as e:
            logger.warning(f"Backend returned malformed schools: {e}")
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to fetch schools: malformed school data")
