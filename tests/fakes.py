# tests/fakes.py
import asyncio
import json
from typing import Dict, List, Optional, Sequence

import httpx

from core.entities import GenerationOutput
from util.errors import EmbeddingError

VOCAB: Sequence[str] = (
    "rem",
    "kendaraan",
    "ketinggian",
    "harness",
    "loto",
    "alkohol",
    "listrik",
    "air",
)

LOTO_REPLY = "KATEGORI: Lock Out & Tag Out\nCONFIDENCE: 90%\nALASAN: LOTO tidak dipasang."


def keyword_vector(text: str) -> List[float]:
    """Bag-of-keywords vector; all zeros when no keyword occurs."""
    lowered = text.lower()
    return [float(lowered.count(word)) for word in VOCAB]


class FakeEmbedder:
    def __init__(
        self,
        vectors: Optional[Dict[str, List[float]]] = None,
        fail_on: Sequence[str] = (),
    ) -> None:
        self.vectors = vectors or {}
        self.fail_on = tuple(fail_on)
        self.calls: List[str] = []

    async def embed(self, text: str) -> List[float]:
        self.calls.append(text)
        if any(marker in text for marker in self.fail_on):
            raise EmbeddingError("Embedding API error: 500 Internal Server Error")
        if text in self.vectors:
            return self.vectors[text]
        return keyword_vector(text)


class FakeGenerator:
    """
    Answers every prompt with `reply` unless a marker from `replies` occurs in
    the prompt. `delays` and `errors` are keyed by prompt marker too.
    """

    model = "fake-model"
    temperature = 0.1
    max_output_tokens = 3072

    def __init__(
        self,
        reply: str = LOTO_REPLY,
        finish_reason: Optional[str] = "STOP",
        replies: Optional[Dict[str, GenerationOutput]] = None,
        delays: Optional[Dict[str, float]] = None,
        errors: Optional[Dict[str, Exception]] = None,
    ) -> None:
        self.reply = reply
        self.finish_reason = finish_reason
        self.replies = replies or {}
        self.delays = delays or {}
        self.errors = errors or {}
        self.prompts: List[str] = []

    @staticmethod
    def _match(prompt: str, table: Dict[str, object]):
        for marker, value in table.items():
            if marker in prompt:
                return value
        return None

    async def generate(self, prompt: str) -> GenerationOutput:
        self.prompts.append(prompt)
        delay = self._match(prompt, self.delays)
        if delay:
            await asyncio.sleep(delay)
        error = self._match(prompt, self.errors)
        if error is not None:
            raise error
        canned = self._match(prompt, self.replies)
        if canned is not None:
            return canned
        return GenerationOutput(text=self.reply, finish_reason=self.finish_reason)


def gemini_transport(
    reply: str = LOTO_REPLY,
    generate_status: int = 200,
    finish_reason: str = "STOP",
) -> httpx.MockTransport:
    """
    Stand-in for both Gemini endpoints: embedContent answers with a keyword
    vector of the sent text, generateContent with `reply`.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path.endswith(":embedContent"):
            body = json.loads(request.content)
            text = body["content"]["parts"][0]["text"]
            return httpx.Response(200, json={"embedding": {"values": keyword_vector(text)}})
        if path.endswith(":generateContent"):
            if generate_status != 200:
                return httpx.Response(generate_status, json={"error": {"code": generate_status}})
            return httpx.Response(
                200,
                json={
                    "candidates": [
                        {
                            "content": {"parts": [{"text": reply}]},
                            "finishReason": finish_reason,
                        }
                    ]
                },
            )
        return httpx.Response(404)

    return httpx.MockTransport(handler)
