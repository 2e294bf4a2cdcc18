# service/knowledge_base_service.py
import logging
from fastapi import UploadFile
from config.settings import settings
from core.chunking import split_into_chunks
from core.pdf_text import extract_knowledge_base_text
from core.similarity_index import IndexRegistry
from model.api import ChunkOut, ChunkPreviewResponse, ExtractTextResponse, InvalidateResponse
from model.knowledge_base import KnowledgeBaseSummary
from repository.knowledge_base_repository import KnowledgeBaseRepository
from util.enums import ErrorMessage
from util.errors import AppError, StoreError

logger = logging.getLogger(__name__)

PDF_TYPES = {"application/pdf"}
TEXT_TYPES = {"text/plain", "text/markdown"}


class KnowledgeBaseService:
    def __init__(self, knowledge_bases: KnowledgeBaseRepository, registry: IndexRegistry) -> None:
        self._kbs = knowledge_bases
        self._registry = registry

    async def list(self) -> list[KnowledgeBaseSummary]:
        try:
            kbs = await self._kbs.list()
        except StoreError as e:
            raise AppError.of(ErrorMessage.STORE_ERROR, str(e))
        return [kb.summary() for kb in kbs]

    async def chunk_preview(self, kb_id: str) -> ChunkPreviewResponse:
        """
        Chunks as the splitter produces them. When the index already holds
        this knowledge base, report which chunks carry an embedding.
        """
        try:
            kb = await self._kbs.get(kb_id)
        except StoreError as e:
            raise AppError.of(ErrorMessage.STORE_ERROR, str(e))
        if kb is None:
            raise AppError.of(ErrorMessage.KNOWLEDGE_BASE_NOT_FOUND, kb_id)

        index = self._registry.peek(kb_id)
        if index is not None and index.is_current(kb.content):
            chunks = [
                ChunkOut(text=c.text, hasEmbedding=c.embedding is not None)
                for c in index.chunks
            ]
            return ChunkPreviewResponse(knowledgeBaseId=kb_id, indexed=True, chunks=chunks)

        texts = split_into_chunks(kb.content, settings.MIN_CHUNK_CHARS)
        return ChunkPreviewResponse(
            knowledgeBaseId=kb_id,
            indexed=False,
            chunks=[ChunkOut(text=t) for t in texts],
        )

    def invalidate(self, kb_id: str) -> InvalidateResponse:
        cleared = self._registry.clear(kb_id)
        logger.info("kb.invalidate kb=%s cleared=%s", kb_id, cleared)
        return InvalidateResponse(knowledgeBaseId=kb_id, cleared=cleared)

    async def extract_text(self, file: UploadFile) -> ExtractTextResponse:
        """
        PDF or plain text -> knowledge-base text plus its chunk preview.
        Logs: sizes only (no payloads).
        """
        try:
            data = await file.read()
            await file.seek(0)
        except Exception:
            logger.error("extract.read.error")
            raise

        ctype = (file.content_type or "").split(";")[0].strip().lower()
        name = (file.filename or "").lower()
        if ctype in PDF_TYPES or name.endswith(".pdf"):
            content = extract_knowledge_base_text(data)
        elif ctype in TEXT_TYPES or name.endswith((".txt", ".md")):
            content = data.decode("utf-8", errors="replace")
        else:
            logger.warning("extract.unsupported type=%s", ctype or "unknown")
            raise AppError.of(ErrorMessage.UNSUPPORTED_DOCUMENT, ctype or None)

        texts = split_into_chunks(content, settings.MIN_CHUNK_CHARS)
        logger.info("extract.ok bytes=%d chars=%d chunks=%d", len(data), len(content), len(texts))
        return ExtractTextResponse(
            fileName=file.filename,
            characters=len(content),
            content=content,
            chunks=[ChunkOut(text=t) for t in texts],
        )
