"""
Integration fixtures: the real app over ASGI, backed by the rolled-back
test session from the root conftest.
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient, Response
from sqlalchemy.ext.asyncio import AsyncSession

from second_brain.backend.core.database import get_db_session
from second_brain.backend.core.security import create_access_token
from second_brain.backend.main import create_app

API = "/api/v1"


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTP client for the app.

    All requests in one test share db_session, so a note created by one
    call is visible to the next; nothing outlives the test.
    """
    app = create_app()

    async def shared_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db_session] = shared_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
    app.dependency_overrides.clear()


class ApiAssertions:
    """Envelope checks shared by the API tests. Each returns the parsed body."""

    @staticmethod
    def _body(response: Response, status: int) -> dict[str, Any]:
        assert response.status_code == status, f"{response.status_code}: {response.text}"
        return response.json()

    def assert_success(self, response: Response, expected_status: int = 200) -> dict[str, Any]:
        body = self._body(response, expected_status)
        assert body["success"] is True
        assert body["error"] is None
        return body

    def assert_error(
        self,
        response: Response,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        body = self._body(response, expected_status)
        assert body["success"] is False
        assert body["data"] is None
        if expected_code is not None:
            assert body["error"]["code"] == expected_code
        return body

    def assert_validation_error(self, response: Response, field: str | None = None) -> dict[str, Any]:
        """400 VAL_REQUEST_INVALID, optionally naming `field` among the violations."""
        body = self.assert_error(response, 400, "VAL_REQUEST_INVALID")
        if field is not None:
            fields = [v["field"] for v in body["error"]["details"]["validation_errors"]]
            assert any(field in f for f in fields), fields
        return body


@pytest.fixture
def api() -> ApiAssertions:
    return ApiAssertions()


def _bearer(user_id: str) -> dict[str, str]:
    token = create_access_token({"sub": user_id, "email": f"{user_id}@example.com"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(test_settings: dict[str, Any]) -> dict[str, str]:
    return _bearer(test_settings["user_id"])


@pytest.fixture
def other_auth_headers(test_settings: dict[str, Any]) -> dict[str, str]:
    """A second author, for checking that records stay private."""
    return _bearer(test_settings["other_user_id"])
