# tests/test_gemini_client.py
import asyncio
import json

import httpx
import pytest

from core.gemini_client import GeminiEmbeddingClient, GeminiGenerationClient
from util.errors import EmbeddingError, GenerationError

BASE = "https://gemini.test/v1beta"


def _transport(status: int = 200, body=None, seen: list | None = None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if isinstance(body, (dict, list)):
            return httpx.Response(status, json=body)
        return httpx.Response(status, content=body or b"")

    return httpx.MockTransport(handler)


def _embedder(transport, timeout: float = 5.0) -> GeminiEmbeddingClient:
    return GeminiEmbeddingClient(
        api_key="k-123", model="text-embedding-004", api_base=BASE, timeout=timeout, transport=transport
    )


def _generator(transport, timeout: float = 5.0, **kw) -> GeminiGenerationClient:
    return GeminiGenerationClient(
        api_key="k-123",
        model="gemini-2.5-flash-lite",
        api_base=BASE,
        timeout=timeout,
        transport=transport,
        **kw,
    )


class TestEmbeddingClient:
    @pytest.mark.asyncio
    async def test_embeds_text(self):
        seen: list = []
        client = _embedder(_transport(body={"embedding": {"values": [0.1, 0.2]}}, seen=seen))

        assert await client.embed("rem blong") == [0.1, 0.2]

        request = seen[0]
        assert request.url.path == "/v1beta/models/text-embedding-004:embedContent"
        assert request.url.params["key"] == "k-123"
        assert json.loads(request.content) == {
            "model": "models/text-embedding-004",
            "content": {"parts": [{"text": "rem blong"}]},
        }

    @pytest.mark.asyncio
    async def test_non_2xx_raises(self):
        client = _embedder(_transport(status=429, body={"error": {}}))
        with pytest.raises(EmbeddingError, match="429"):
            await client.embed("x")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [{"embedding": {}}, {"embedding": {"values": []}}, {"other": 1}, b"not json"],
    )
    async def test_malformed_payload_raises(self, body):
        client = _embedder(_transport(body=body))
        with pytest.raises(EmbeddingError, match="Invalid embedding response format"):
            await client.embed("x")

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = _embedder(httpx.MockTransport(handler))
        with pytest.raises(EmbeddingError, match="ConnectError"):
            await client.embed("x")


class TestGenerationClient:
    @pytest.mark.asyncio
    async def test_generates_text(self):
        seen: list = []
        body = {
            "candidates": [
                {"content": {"parts": [{"text": "KATEGORI: X"}]}, "finishReason": "STOP"}
            ]
        }
        client = _generator(_transport(body=body, seen=seen))

        out = await client.generate("prompt")

        assert out.text == "KATEGORI: X"
        assert out.finish_reason == "STOP"
        assert not out.truncated
        payload = json.loads(seen[0].content)
        assert payload["contents"] == [{"parts": [{"text": "prompt"}]}]
        assert payload["generationConfig"] == {"temperature": 0.1, "maxOutputTokens": 3072}

    @pytest.mark.asyncio
    async def test_optional_sampling_knobs_are_sent_when_set(self):
        seen: list = []
        body = {"candidates": [{"text": "ok"}]}
        client = _generator(_transport(body=body, seen=seen), top_k=40, top_p=0.95)

        await client.generate("p")

        config = json.loads(seen[0].content)["generationConfig"]
        assert config["topK"] == 40
        assert config["topP"] == 0.95

    @pytest.mark.asyncio
    async def test_max_tokens_is_reported_truncated(self):
        body = {
            "candidates": [
                {"content": {"parts": [{"text": "KATEGORI: X\nCONF"}]}, "finishReason": "MAX_TOKENS"}
            ]
        }
        out = await _generator(_transport(body=body)).generate("p")
        assert out.truncated
        assert out.text == "KATEGORI: X\nCONF"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "candidate, expected",
        [
            ({"output": "from output"}, "from output"),
            ({"text": "from text"}, "from text"),
            ("bare string", "bare string"),
            ({"content": {"parts": []}}, None),
        ],
    )
    async def test_alternate_candidate_shapes(self, candidate, expected):
        out = await _generator(_transport(body={"candidates": [candidate]})).generate("p")
        assert out.text == expected

    @pytest.mark.asyncio
    async def test_no_candidates_raises(self):
        client = _generator(_transport(body={"candidates": []}))
        with pytest.raises(GenerationError, match="No response generated from API"):
            await client.generate("p")

    @pytest.mark.asyncio
    async def test_non_2xx_carries_status(self):
        client = _generator(_transport(status=503, body={"error": {}}))
        with pytest.raises(GenerationError) as exc:
            await client.generate("p")
        assert exc.value.status_code == 503
        assert "Generation API error: 503" in str(exc.value)

    @pytest.mark.asyncio
    async def test_hung_call_hits_deadline(self):
        async def handler(request):
            await asyncio.sleep(5)
            return httpx.Response(200, json={"candidates": [{"text": "late"}]})

        client = _generator(httpx.MockTransport(handler), timeout=0.05)
        with pytest.raises(GenerationError, match="timed out"):
            await client.generate("p")
