# service/hazard_analysis_service.py
import asyncio
import logging
from typing import List, Optional, Sequence
from uuid import uuid4
import httpx
from config.settings import settings
from core.batch_analysis import run_batch
from core.entities import AnalysisSpec, BatchResult, DocumentChunk
from core.fallback import fallback_analysis
from core.gemini_client import GeminiEmbeddingClient, GeminiGenerationClient
from core.prompt_composer import build_context_text
from core.rag_pipeline import analyze_hazard
from core.similarity_index import IndexRegistry
from model.api import (
    AnalyzeAllRequest,
    AnalyzeHazardRequest,
    AnalyzeHazardResponse,
    BatchAnalysisRequest,
    BatchAnalysisResponse,
    BatchReport,
    BatchResultItem,
    ChunkOut,
    RetrieveContextRequest,
    RetrievedContext,
    ThinkingStepOut,
)
from model.knowledge_base import KnowledgeBaseConfig
from repository.knowledge_base_repository import KnowledgeBaseRepository
from repository.report_repository import ReportRepository
from util import functions
from util.enums import ErrorMessage
from util.errors import AnalysisError, AppError, StoreError

logger = logging.getLogger(__name__)


def chunk_out(chunk: DocumentChunk) -> ChunkOut:
    return ChunkOut(
        text=chunk.text,
        similarity=chunk.similarity,
        hasEmbedding=chunk.embedding is not None,
    )


def batch_items(batch: BatchResult) -> List[BatchResultItem]:
    return [
        BatchResultItem(
            knowledgeBaseId=r.knowledge_base_id,
            knowledgeBaseName=r.knowledge_base_name,
            category=r.category,
            confidence=r.confidence,
            reasoning=r.reasoning,
            color=r.color,
            processingTime=r.processing_time,
            thinkingSteps=[
                ThinkingStepOut(
                    step=s.step,
                    name=s.name,
                    description=s.description,
                    duration=s.duration,
                    details=s.details,
                    status=s.status,
                )
                for s in r.thinking_steps
            ]
            or None,
        )
        for r in batch.results
    ]


class HazardAnalysisService:
    def __init__(
        self,
        knowledge_bases: KnowledgeBaseRepository,
        registry: IndexRegistry,
        reports: ReportRepository,
        api_key: Optional[str] = settings.GEMINI_API_KEY,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._kbs = knowledge_bases
        self._registry = registry
        self._reports = reports
        self._api_key = api_key
        self._transport = transport

    # ---------------- wiring ----------------

    def _key(self, override: Optional[str]) -> str:
        key = override or self._api_key
        if not key:
            logger.error("analysis.key.missing")
            raise AppError.of(ErrorMessage.MISSING_API_KEY)
        return key

    def _embedder(self, api_key: Optional[str] = None) -> GeminiEmbeddingClient:
        return GeminiEmbeddingClient(api_key=self._key(api_key), transport=self._transport)

    def _generator(self, api_key: Optional[str] = None) -> GeminiGenerationClient:
        return GeminiGenerationClient(api_key=self._key(api_key), transport=self._transport)

    async def _kb(self, kb_id: str) -> KnowledgeBaseConfig:
        try:
            kb = await self._kbs.get(kb_id)
        except StoreError as e:
            raise AppError.of(ErrorMessage.STORE_ERROR, str(e))
        if kb is None:
            raise AppError.of(ErrorMessage.KNOWLEDGE_BASE_NOT_FOUND, kb_id)
        return kb

    async def _selected(
        self, kb_ids: Optional[Sequence[str]]
    ) -> List[KnowledgeBaseConfig]:
        if kb_ids is None:
            try:
                return await self._kbs.list()
            except StoreError as e:
                raise AppError.of(ErrorMessage.STORE_ERROR, str(e))
        return [await self._kb(kb_id) for kb_id in kb_ids]

    # ---------------- single analysis ----------------

    async def analyze(self, req: AnalyzeHazardRequest) -> AnalyzeHazardResponse:
        """
        One hazard vs one knowledge base. When the pipeline fails, answer with
        the keyword fallback instead of an error.
        """
        kb = await self._kb(req.knowledgeBaseId)
        embedder = self._embedder(req.apiKey)
        generator = self._generator(req.apiKey)
        logger.info(
            "analysis.start kb=%s chars=%d", kb.id, len(req.hazardDescription)
        )
        try:
            result = await analyze_hazard(
                hazard_description=req.hazardDescription,
                knowledge_base_text=kb.content,
                prompt_template=kb.promptTemplate,
                index=self._registry.get(kb.id),
                embedder=embedder,
                generator=generator,
                top_k=settings.RETRIEVAL_TOP_K,
            )
        except AnalysisError as e:
            logger.warning("analysis.fallback kb=%s ms=%d", kb.id, e.processing_time)
            fb = fallback_analysis(req.hazardDescription, e.cause)
            return AnalyzeHazardResponse(
                knowledgeBaseId=kb.id,
                knowledgeBaseName=kb.name,
                category=fb.category,
                confidence=fb.confidence,
                reasoning=fb.reasoning,
                retrievedContext=[],
                fullResponse="",
                processingTime=e.processing_time,
                color=kb.color,
                source="fallback",
                riskLevel=fb.risk_level.value,
                dueDateSuggestion=fb.due_date_days,
                error=str(e),
            )

        return AnalyzeHazardResponse(
            knowledgeBaseId=kb.id,
            knowledgeBaseName=kb.name,
            category=result.category,
            confidence=result.confidence,
            reasoning=result.reasoning,
            retrievedContext=[chunk_out(c) for c in result.retrieved_context],
            fullResponse=result.full_response,
            processingTime=result.processing_time,
            color=kb.color,
        )

    # ---------------- retrieval (upstream of batch) ----------------

    async def _retrieve_for(
        self,
        kb: KnowledgeBaseConfig,
        hazard_description: str,
        embedder: GeminiEmbeddingClient,
        top_k: int,
    ) -> RetrievedContext:
        index = self._registry.get(kb.id)
        await index.build(kb.content, embedder)
        chunks = await index.retrieve(hazard_description, embedder, top_k=top_k)
        return RetrievedContext(
            knowledgeBaseId=kb.id,
            knowledgeBaseName=kb.name,
            color=kb.color,
            chunks=[chunk_out(c) for c in chunks],
            contextText=build_context_text(chunks),
        )

    async def retrieve_contexts(
        self, req: RetrieveContextRequest
    ) -> List[RetrievedContext]:
        kbs = await self._selected(req.knowledgeBaseIds)
        embedder = self._embedder(req.apiKey)
        return await self._retrieve_all(
            kbs, req.hazardDescription, embedder, req.topK
        )

    async def _retrieve_all(
        self,
        kbs: Sequence[KnowledgeBaseConfig],
        hazard_description: str,
        embedder: GeminiEmbeddingClient,
        top_k: int,
    ) -> List[RetrievedContext]:
        outcomes = await asyncio.gather(
            *(self._retrieve_for(kb, hazard_description, embedder, top_k) for kb in kbs),
            return_exceptions=True,
        )
        contexts: List[RetrievedContext] = []
        for kb, outcome in zip(kbs, outcomes):
            if isinstance(outcome, BaseException):
                # Empty context; the batch substitutes its placeholder text
                logger.error("retrieve.error kb=%s err=%s", kb.id, outcome)
                contexts.append(
                    RetrievedContext(
                        knowledgeBaseId=kb.id,
                        knowledgeBaseName=kb.name,
                        color=kb.color,
                        chunks=[],
                        contextText="",
                    )
                )
            else:
                contexts.append(outcome)
        return contexts

    # ---------------- batch ----------------

    async def _persist(
        self, hazard_description: str, batch: BatchResult, items: List[BatchResultItem]
    ) -> Optional[str]:
        report = BatchReport(
            reportId=str(uuid4()),
            createdAt=functions.utc_now_iso(),
            hazardDescription=hazard_description,
            results=items,
            totalProcessingTime=batch.total_processing_time,
        )
        try:
            await self._reports.save(report)
        except Exception:
            logger.error("batch.report.persist.error", exc_info=True)
            return None
        logger.info("batch.report.saved report=%s", report.reportId)
        return report.reportId

    async def _run(
        self,
        hazard_description: str,
        specs: List[AnalysisSpec],
        api_key: Optional[str] = None,
    ) -> BatchAnalysisResponse:
        generator = self._generator(api_key)
        batch = await run_batch(
            hazard_description=hazard_description,
            analyses=specs,
            generator=generator,
            concurrency=settings.BATCH_CONCURRENCY,
        )
        items = batch_items(batch)
        report_id = await self._persist(hazard_description, batch, items)
        return BatchAnalysisResponse(
            results=items,
            totalProcessingTime=batch.total_processing_time,
            reportId=report_id,
        )

    async def run_batch(self, req: BatchAnalysisRequest) -> BatchAnalysisResponse:
        specs = [
            AnalysisSpec(
                knowledge_base_id=a.knowledgeBaseId,
                knowledge_base_name=a.knowledgeBaseName,
                color=a.color,
                retrieved_context=a.retrievedContext,
                prompt_template=a.promptTemplate,
            )
            for a in req.analyses
        ]
        return await self._run(req.hazardDescription or "", specs)

    async def analyze_all(self, req: AnalyzeAllRequest) -> BatchAnalysisResponse:
        """
        Retrieve context per selected knowledge base, then fan out the batch.
        """
        kbs = await self._selected(req.knowledgeBaseIds)
        embedder = self._embedder(req.apiKey)
        contexts = await self._retrieve_all(
            kbs, req.hazardDescription, embedder, settings.RETRIEVAL_TOP_K
        )
        specs = [
            AnalysisSpec(
                knowledge_base_id=kb.id,
                knowledge_base_name=kb.name,
                color=kb.color,
                retrieved_context=ctx.contextText,
                prompt_template=kb.promptTemplate,
            )
            for kb, ctx in zip(kbs, contexts)
        ]
        return await self._run(req.hazardDescription, specs, req.apiKey)

    async def get_report(self, report_id: str) -> BatchReport:
        report = await self._reports.get(report_id)
        if report is None:
            raise AppError.of(ErrorMessage.REPORT_NOT_FOUND)
        return report
