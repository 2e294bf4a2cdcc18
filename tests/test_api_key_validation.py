# tests/test_api_key_validation.py
import json

import httpx
import pytest

from service.api_key_validation_service import ApiKeyValidationService
from util.errors import AppError


def _service(handler) -> ApiKeyValidationService:
    return ApiKeyValidationService(transport=httpx.MockTransport(handler))


class TestApiKeyValidation:
    @pytest.mark.asyncio
    async def test_sends_one_token_ping_with_key(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"candidates": []})

        await _service(handler).validate_key("AIza-good")

        assert seen[0].url.params["key"] == "AIza-good"
        assert json.loads(seen[0].content)["generationConfig"] == {"maxOutputTokens": 1}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 401, 403])
    async def test_rejected_key_is_401(self, status):
        with pytest.raises(AppError) as exc:
            await _service(lambda r: httpx.Response(status)).validate_key("bad")
        assert exc.value.status_code == 401

    @pytest.mark.asyncio
    async def test_upstream_failure_is_502(self):
        with pytest.raises(AppError) as exc:
            await _service(lambda r: httpx.Response(500)).validate_key("k")
        assert exc.value.status_code == 502

    @pytest.mark.asyncio
    async def test_network_error_is_502(self):
        def handler(request):
            raise httpx.ConnectTimeout("slow", request=request)

        with pytest.raises(AppError) as exc:
            await _service(handler).validate_key("k")
        assert exc.value.status_code == 502
