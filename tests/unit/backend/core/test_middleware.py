"""
Unit Tests for Request Context Middleware.

Tests request ID propagation, timing headers and request logging level.
"""

from unittest.mock import MagicMock, patch

import pytest
from starlette.requests import Request
from starlette.responses import Response

from xnote.backend.core.middleware import RequestContextMiddleware


@pytest.fixture
def mock_request():
    """Create a mock request."""
    request = MagicMock(spec=Request)
    request.headers = {}
    request.method = "GET"
    request.url = MagicMock()
    request.url.path = "/api/notes"
    request.client = MagicMock()
    request.client.host = "127.0.0.1"
    request.state = MagicMock()
    return request


async def _ok(request):
    return Response(content="OK", status_code=200)


class TestRequestContextMiddleware:
    """Tests for RequestContextMiddleware."""

    async def test_propagates_request_id(self, mock_request):
        mock_request.headers = {"X-Request-ID": "req-42"}
        middleware = RequestContextMiddleware(MagicMock())

        response = await middleware.dispatch(mock_request, _ok)

        assert response.headers["X-Request-ID"] == "req-42"
        assert mock_request.state.request_id == "req-42"

    async def test_generates_request_id(self, mock_request):
        middleware = RequestContextMiddleware(MagicMock())

        response = await middleware.dispatch(mock_request, _ok)

        assert len(response.headers["X-Request-ID"]) == 36

    async def test_sets_response_time_header(self, mock_request):
        middleware = RequestContextMiddleware(MagicMock())

        response = await middleware.dispatch(mock_request, _ok)

        assert response.headers["X-Response-Time"].endswith("ms")

    async def test_binds_web_source(self, mock_request):
        middleware = RequestContextMiddleware(MagicMock())

        with patch("xnote.backend.core.middleware.structlog.contextvars") as contextvars:
            await middleware.dispatch(mock_request, _ok)

        assert contextvars.bind_contextvars.call_args.kwargs["source"] == "web"
        contextvars.clear_contextvars.assert_called()

    @pytest.mark.parametrize(("log_requests", "level"), [(True, "info"), (False, "debug")])
    async def test_completion_log_level(self, mock_request, mock_logger, log_requests, level):
        middleware = RequestContextMiddleware(MagicMock(), log_requests=log_requests)

        with patch("xnote.backend.core.middleware.logger", mock_logger):
            await middleware.dispatch(mock_request, _ok)

        messages = [call.args[0] for call in getattr(mock_logger, level).call_args_list]
        assert "Request completed" in messages

    async def test_exception_is_reraised(self, mock_request):
        middleware = RequestContextMiddleware(MagicMock())

        async def failing(request):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await middleware.dispatch(mock_request, failing)
