# core/gemini_client.py
import asyncio
from typing import Any, Dict, List, Optional
import httpx
from config.settings import settings
from core.entities import GenerationOutput
from util.constants import ExternalURIs
from util.errors import EmbeddingError, GenerationError
import logging
from util.timing import timed

logger = logging.getLogger(__name__)


async def _post_json(
    url: str,
    payload: Dict[str, Any],
    *,
    api_key: str,
    timeout: float,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.Response:
    """
    JSON POST to a Gemini endpoint with the key as query param.
    `timeout` bounds the whole call, not only each socket operation.
    """
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        return await asyncio.wait_for(
            client.post(url, params={"key": api_key}, json=payload), timeout=timeout
        )


def _json_or_none(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return None


def _candidate_text(candidate: Any) -> Optional[str]:
    """
    Pull the reply text out of a candidate, accepting the shapes the endpoint
    has been seen to return. None when nothing usable is present.
    """
    if isinstance(candidate, str):
        return candidate
    if not isinstance(candidate, dict):
        return None
    content = candidate.get("content")
    if isinstance(content, dict):
        parts = content.get("parts") or []
        if parts and isinstance(parts[0], dict) and parts[0].get("text"):
            return str(parts[0]["text"])
    for key in ("output", "text"):
        if candidate.get(key):
            return str(candidate[key])
    return None


class GeminiEmbeddingClient:
    """
    text -> vector via `models/<model>:embedContent`.
    """

    def __init__(
        self,
        *,
        api_key: str,
        model: str = settings.GEMINI_EMBEDDING_MODEL,
        api_base: str = settings.GEMINI_API_BASE,
        timeout: float = settings.EMBEDDING_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self.model = model
        self._url = ExternalURIs.EMBED_CONTENT.format(base=api_base, model=model)
        self._timeout = timeout
        self._transport = transport

    async def embed(self, text: str) -> List[float]:
        payload = {
            "model": f"models/{self.model}",
            "content": {"parts": [{"text": text}]},
        }
        try:
            with timed(logger, "ai.embed", chars=len(text)):
                resp = await _post_json(
                    self._url,
                    payload,
                    api_key=self._api_key,
                    timeout=self._timeout,
                    transport=self._transport,
                )
        except asyncio.TimeoutError as e:
            logger.warning("ai.embed.timeout after=%.1fs", self._timeout)
            raise EmbeddingError(
                f"Embedding request timed out after {self._timeout:g}s"
            ) from e
        except httpx.HTTPError as e:
            logger.warning("ai.embed.request_error err=%s", type(e).__name__)
            raise EmbeddingError(f"Embedding request failed: {type(e).__name__}") from e

        if resp.status_code // 100 != 2:
            logger.warning("ai.embed.bad_status %d", resp.status_code)
            raise EmbeddingError(
                f"Embedding API error: {resp.status_code} {resp.reason_phrase}"
            )

        data = _json_or_none(resp)
        values = None
        if isinstance(data, dict) and isinstance(data.get("embedding"), dict):
            values = data["embedding"].get("values")
        if not isinstance(values, list) or not values:
            logger.warning("ai.embed.bad_payload")
            raise EmbeddingError("Invalid embedding response format")
        try:
            return [float(v) for v in values]
        except (TypeError, ValueError) as e:
            raise EmbeddingError("Invalid embedding response format") from e


class GeminiGenerationClient:
    """
    prompt -> free text via `models/<model>:generateContent`.

    Non-2xx, transport errors and timeouts raise GenerationError. A reply that
    stopped on the token ceiling comes back with finish_reason MAX_TOKENS; the
    caller decides how to mark it.
    """

    def __init__(
        self,
        *,
        api_key: str,
        model: str = settings.GEMINI_GENERATION_MODEL,
        api_base: str = settings.GEMINI_API_BASE,
        temperature: float = settings.GENERATION_TEMPERATURE,
        max_output_tokens: int = settings.GENERATION_MAX_OUTPUT_TOKENS,
        top_k: Optional[int] = settings.GENERATION_TOP_K,
        top_p: Optional[float] = settings.GENERATION_TOP_P,
        timeout: float = settings.GENERATION_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self._top_k = top_k
        self._top_p = top_p
        self._url = ExternalURIs.GENERATE_CONTENT.format(base=api_base, model=model)
        self._timeout = timeout
        self._transport = transport

    def _payload(self, prompt: str) -> Dict[str, Any]:
        config: Dict[str, Any] = {
            "temperature": self.temperature,
            "maxOutputTokens": self.max_output_tokens,
        }
        if self._top_k is not None:
            config["topK"] = self._top_k
        if self._top_p is not None:
            config["topP"] = self._top_p
        return {"contents": [{"parts": [{"text": prompt}]}], "generationConfig": config}

    async def generate(self, prompt: str) -> GenerationOutput:
        try:
            with timed(logger, "ai.generate", model=self.model, chars=len(prompt)):
                resp = await _post_json(
                    self._url,
                    self._payload(prompt),
                    api_key=self._api_key,
                    timeout=self._timeout,
                    transport=self._transport,
                )
        except asyncio.TimeoutError as e:
            logger.error("ai.generate.timeout after=%.1fs", self._timeout)
            raise GenerationError(
                f"Generation request timed out after {self._timeout:g}s"
            ) from e
        except httpx.HTTPError as e:
            logger.error("ai.generate.request_error err=%s", type(e).__name__)
            raise GenerationError(
                f"Generation request failed: {type(e).__name__}"
            ) from e

        if resp.status_code // 100 != 2:
            logger.error("ai.generate.bad_status %d", resp.status_code)
            raise GenerationError(
                f"Generation API error: {resp.status_code} {resp.reason_phrase}",
                status_code=resp.status_code,
            )

        data = _json_or_none(resp)
        candidates = data.get("candidates") if isinstance(data, dict) else None
        if not candidates:
            logger.error("ai.generate.no_candidates")
            raise GenerationError(
                "No response generated from API", status_code=resp.status_code
            )

        candidate = candidates[0]
        finish = candidate.get("finishReason") if isinstance(candidate, dict) else None
        text = _candidate_text(candidate)
        logger.info(
            "ai.generate.result finish=%s chars=%d",
            finish,
            len(text) if text is not None else -1,
        )
        return GenerationOutput(
            text=text, finish_reason=finish, status_code=resp.status_code
        )
