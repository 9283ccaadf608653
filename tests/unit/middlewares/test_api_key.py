"""Tests for APIKeyAuthentication."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock

from expresso.middlewares.api_key import APIKeyAuthentication


class TestAPIKeyAuthentication:
    async def test_header_key_accepted(self, make_context: Any) -> None:
        validate = AsyncMock(return_value={"key": "foo"})
        ctx = make_context(headers={"api-key": "foo"})
        await APIKeyAuthentication(validate)(ctx)
        validate.assert_awaited_once_with("foo")
        assert ctx.extras["api_key"] == {"key": "foo"}
        assert ctx.advancing is True
        assert not ctx.response.committed

    async def test_query_param_fallback(self, make_context: Any) -> None:
        validate = AsyncMock(return_value="bar")
        ctx = make_context(query_string="api-key=bar")
        await APIKeyAuthentication(validate)(ctx)
        validate.assert_awaited_once_with("bar")
        assert ctx.advancing is True
        assert "not found in headers" in ctx.logger.entries[0].message

    async def test_missing_key_is_401(self, make_context: Any) -> None:
        validate = AsyncMock()
        ctx = make_context(headers={"Accept": "application/json"})
        await APIKeyAuthentication(validate)(ctx)
        validate.assert_not_awaited()
        response = ctx.response.to_response()
        assert response.status_code == 401
        assert json.loads(response.body) == {"status": 401, "error": "invalid api key"}
        assert ctx.advancing is False

    async def test_rejected_key_is_401(self, make_context: Any) -> None:
        validate = AsyncMock(return_value=None)
        ctx = make_context(headers={"api-key": "nope", "Accept": "text/plain"})
        await APIKeyAuthentication(validate)(ctx)
        response = ctx.response.to_response()
        assert response.status_code == 401
        assert response.body == b"Error - invalid api key"

    async def test_validator_failure_is_401(self, make_context: Any) -> None:
        validate = AsyncMock(side_effect=Exception("backend down"))
        ctx = make_context(headers={"api-key": "foo"})
        await APIKeyAuthentication(validate)(ctx)
        assert ctx.response.to_response().status_code == 401
        assert "backend down" in ctx.logger.entries[0].message

    async def test_custom_header_name(self, make_context: Any) -> None:
        validate = AsyncMock(return_value="svc")
        ctx = make_context(headers={"X-API-Key": "k"})
        await APIKeyAuthentication(validate, header="X-API-Key")(ctx)
        validate.assert_awaited_once_with("k")
