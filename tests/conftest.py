import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import httpx
import pytest
from fastapi.testclient import TestClient

import main
from app.services.school_api import SchoolAPIService
from app.utils import deps


class BackendStub:
    """Stands in for the school backend and records every request it gets."""

    def __init__(self):
        self.schools = []
        self.create_status = 200
        self.list_status = 200
        self.network_down = False
        self.requests = []
        self.bodies = []

    @property
    def create_calls(self):
        return [r for r in self.requests if r.method == "POST" and r.url.path == "/create"]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.bodies.append(request.read())

        if self.network_down:
            raise httpx.ConnectError("Connection refused", request=request)

        if request.method == "POST" and request.url.path == "/create":
            if self.create_status >= 400:
                return httpx.Response(self.create_status, json={"message": "Database error"})
            return httpx.Response(self.create_status, json={"message": "School added", "id": 1})

        if request.method == "GET" and request.url.path == "/schools":
            if self.list_status >= 400:
                return httpx.Response(self.list_status, json={"message": "Database error"})
            return httpx.Response(self.list_status, json=self.schools)

        return httpx.Response(404, json={"message": "Not found"})


@pytest.fixture
def backend():
    return BackendStub()

@pytest.fixture
def school_api(backend):
    return SchoolAPIService(base_url="http://backend.test", transport=httpx.MockTransport(backend))

@pytest.fixture
def client(school_api):
    main.app.dependency_overrides[deps.get_school_api] = lambda: school_api
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()
