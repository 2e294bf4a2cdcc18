# service/api_key_validation_service.py
import httpx
from fastapi import status
from config.settings import settings
from util.constants import ExternalURIs
from util.enums import ErrorMessage
from util.errors import AppError
import logging

logger = logging.getLogger(__name__)


class ApiKeyValidationService:
    """
    Service to validate a user-entered Gemini API key
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._model: str = settings.GEMINI_GENERATION_MODEL
        self._url: str = ExternalURIs.GENERATE_CONTENT.format(
            base=settings.GEMINI_API_BASE, model=self._model
        )
        self._transport = transport

    async def validate_key(self, api_key: str) -> None:
        payload = {
            "contents": [{"parts": [{"text": "Ping"}]}],
            "generationConfig": {"maxOutputTokens": 1},
        }
        timeout = httpx.Timeout(10.0, connect=5.0)

        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                res = await client.post(
                    self._url,
                    params={"key": api_key},
                    headers={"content-type": "application/json"},
                    json=payload,
                )
        except httpx.RequestError as e:
            logger.error("api.key.request_error err=%s", type(e).__name__)
            raise AppError.of(ErrorMessage.INTERNAL_ERROR)

        if res.status_code // 100 == 2:
            logger.info("api.key.validated model=%s", self._model)
            return

        # Gemini answers 400 API_KEY_INVALID for a malformed or unknown key
        if res.status_code in (
            status.HTTP_400_BAD_REQUEST,
            status.HTTP_401_UNAUTHORIZED,
            status.HTTP_403_FORBIDDEN,
        ):
            logger.warning("api.key.invalid status=%d", res.status_code)
            raise AppError.of(ErrorMessage.INVALID_API_KEY)

        logger.error("api.key.unexpected status=%d", res.status_code)
        raise AppError.of(ErrorMessage.INTERNAL_ERROR)
