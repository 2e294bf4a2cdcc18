# core/similarity_index.py
import asyncio
import hashlib
from dataclasses import replace
from typing import Dict, List, Optional, Protocol, Sequence, Tuple
import numpy as np
from core.chunking import MIN_CHUNK_CHARS, split_into_chunks
from core.entities import DocumentChunk
from util.errors import EmbeddingError, IndexNotBuiltError
from util.timing import timed
import logging

logger = logging.getLogger(__name__)


class Embedder(Protocol):
    async def embed(self, text: str) -> List[float]: ...


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    dot(a, b) / (|a| * |b|). 0.0 when lengths differ or either vector is zero.
    """
    if len(a) != len(b):
        return 0.0
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    denom = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if denom == 0.0:
        return 0.0
    return float(np.dot(va, vb) / denom)


def content_hash(text: str) -> str:
    return hashlib.sha1(text.encode("utf-8")).hexdigest()


class SimilarityIndex:
    """
    In-memory chunks of ONE knowledge-base text, each with an optional embedding.

    Invalidation is part of the API: build() with the same text is a no-op,
    build() with different text replaces every chunk, clear() empties the index.
    Entries never expire on their own. build() and retrieve() are serialized
    through one lock, so a reader never observes a half-built index.
    """

    def __init__(
        self, min_chunk_chars: int = MIN_CHUNK_CHARS, embed_concurrency: int = 4
    ) -> None:
        self._min_chars = min_chunk_chars
        self._embed_concurrency = max(1, embed_concurrency)
        self._chunks: List[DocumentChunk] = []
        self._hash: Optional[str] = None
        self._lock = asyncio.Lock()

    @property
    def chunks(self) -> Tuple[DocumentChunk, ...]:
        return tuple(self._chunks)

    @property
    def is_built(self) -> bool:
        return self._hash is not None

    def is_current(self, text: str) -> bool:
        return self._hash == content_hash(text)

    async def build(self, text: str, embedder: Embedder) -> bool:
        """
        Split `text` and embed each chunk on its own. A chunk whose embedding
        fails stays in the index without one. Returns False when the index
        already holds exactly this text.
        """
        digest = content_hash(text)
        async with self._lock:
            if self._hash == digest:
                return False

            texts = split_into_chunks(text, self._min_chars)
            sem = asyncio.Semaphore(self._embed_concurrency)

            async def _one(chunk_text: str) -> DocumentChunk:
                async with sem:
                    try:
                        return DocumentChunk(
                            text=chunk_text, embedding=await embedder.embed(chunk_text)
                        )
                    except EmbeddingError as e:
                        logger.warning("index.chunk.embed_failed err=%s", e)
                        return DocumentChunk(text=chunk_text)

            with timed(logger, "index.build", chunks=len(texts)):
                # gather keeps positions, so chunks stay in document order
                built = await asyncio.gather(*(_one(t) for t in texts))

            self._chunks = list(built)
            self._hash = digest

        missing = sum(1 for c in built if c.embedding is None)
        logger.info("index.built chunks=%d unembedded=%d", len(built), missing)
        return True

    def clear(self) -> None:
        self._chunks = []
        self._hash = None
        logger.info("index.cleared")

    async def retrieve(
        self, query: str, embedder: Embedder, top_k: int = 3
    ) -> List[DocumentChunk]:
        """
        Top-k chunks by cosine similarity to `query`, best first; ties keep
        document order. Chunks without an embedding are never ranked.

        If the query itself cannot be embedded, the first `top_k` chunks are
        returned in document order (unscored).
        """
        async with self._lock:
            # text that yielded no chunks counts as unprocessed
            if not self.is_built or not self._chunks:
                raise IndexNotBuiltError("Knowledge base not processed yet")
            chunks = list(self._chunks)

        try:
            query_vec = await embedder.embed(query)
        except EmbeddingError as e:
            logger.warning("index.retrieve.fallback err=%s", e)
            return chunks[:top_k]

        scored = [
            replace(c, similarity=cosine_similarity(query_vec, c.embedding))
            for c in chunks
            if c.embedding is not None
        ]
        # list.sort is stable, also with reverse=True
        scored.sort(key=lambda c: c.similarity, reverse=True)
        out = scored[: max(0, top_k)]
        logger.info("index.retrieve k=%d ranked=%d", len(out), len(scored))
        return out


class IndexRegistry:
    """
    One SimilarityIndex per knowledge-base id, created on first use.
    Process-local.
    """

    def __init__(
        self, min_chunk_chars: int = MIN_CHUNK_CHARS, embed_concurrency: int = 4
    ) -> None:
        self._min_chars = min_chunk_chars
        self._embed_concurrency = embed_concurrency
        self._indexes: Dict[str, SimilarityIndex] = {}

    def get(self, kb_id: str) -> SimilarityIndex:
        index = self._indexes.get(kb_id)
        if index is None:
            index = SimilarityIndex(self._min_chars, self._embed_concurrency)
            self._indexes[kb_id] = index
        return index

    def peek(self, kb_id: str) -> Optional[SimilarityIndex]:
        return self._indexes.get(kb_id)

    def clear(self, kb_id: str) -> bool:
        index = self._indexes.get(kb_id)
        if index is None:
            return False
        index.clear()
        return True
