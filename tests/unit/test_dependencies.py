"""
Unit tests for the FastAPI authorization dependencies.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import HTTPException

from fga_access.dependencies import get_access_control, get_current_subject, require_relation


@pytest.fixture
def mock_request():
    """Create a mock FastAPI Request object."""
    request = MagicMock()
    request.app = MagicMock()
    request.app.state = SimpleNamespace()
    request.state = SimpleNamespace()
    request.path_params = {}
    return request


@pytest.fixture
def mock_access_control():
    access_control = MagicMock()
    access_control.check = AsyncMock(return_value=True)
    return access_control


class TestGetAccessControl:
    @pytest.mark.asyncio
    async def test_found(self, mock_request, mock_access_control):
        mock_request.app.state.access_control = mock_access_control

        assert await get_access_control(mock_request) is mock_access_control

    @pytest.mark.asyncio
    async def test_missing_returns_503(self, mock_request):
        with pytest.raises(HTTPException) as exc_info:
            await get_access_control(mock_request)

        assert exc_info.value.status_code == 503


class TestGetCurrentSubject:
    @pytest.mark.asyncio
    async def test_found(self, mock_request):
        mock_request.state.subject = "user:anne"

        assert await get_current_subject(mock_request) == "user:anne"

    @pytest.mark.asyncio
    async def test_missing_returns_401(self, mock_request):
        with pytest.raises(HTTPException) as exc_info:
            await get_current_subject(mock_request)

        assert exc_info.value.status_code == 401


class TestRequireRelation:
    @pytest.mark.asyncio
    async def test_granted(self, mock_request, mock_access_control):
        mock_request.path_params = {"id": "42"}
        dependency = require_relation("editor", "doc")

        result = await dependency(
            mock_request, subject="user:1", access_control=mock_access_control
        )

        assert result == "user:1"
        mock_access_control.check.assert_awaited_once_with("user:1", "editor", "doc:42")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("allowed", [False, None])
    async def test_denied_or_indeterminate_returns_403(
        self, mock_request, mock_access_control, allowed
    ):
        mock_request.path_params = {"doc_id": "42"}
        mock_access_control.check.return_value = allowed
        dependency = require_relation("editor", "doc", path_param="doc_id")

        with pytest.raises(HTTPException) as exc_info:
            await dependency(mock_request, subject="user:1", access_control=mock_access_control)

        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_missing_path_param_returns_500(self, mock_request, mock_access_control):
        dependency = require_relation("editor", "doc")

        with pytest.raises(HTTPException) as exc_info:
            await dependency(mock_request, subject="user:1", access_control=mock_access_control)

        assert exc_info.value.status_code == 500
        mock_access_control.check.assert_not_awaited()
