# controller/controller_dependencies.py
from functools import lru_cache
from typing import Optional
from fastapi import File, HTTPException, Request, UploadFile
from fastapi_limiter.depends import RateLimiter
from config.settings import settings
from core.similarity_index import IndexRegistry
from repository.knowledge_base_repository import KnowledgeBaseRepository
from repository.prompt_cache import PromptTemplateCache
from repository.prompt_repository import PromptRepository
from repository.report_repository import ReportRepository
from repository.store_client import StoreClient
from service.api_key_validation_service import ApiKeyValidationService
from service.hazard_analysis_service import HazardAnalysisService
from service.knowledge_base_service import KnowledgeBaseService
from service.prompt_service import PromptService

rate_limiter = RateLimiter(
    times=settings.RATE_LIMIT_TIMES, seconds=settings.RATE_LIMIT_SECONDS
)


@lru_cache(maxsize=1)
def get_index_registry() -> IndexRegistry:
    # Process-wide: embeddings survive across requests until invalidated
    return IndexRegistry(
        min_chunk_chars=settings.MIN_CHUNK_CHARS,
        embed_concurrency=settings.EMBED_CONCURRENCY,
    )


@lru_cache(maxsize=1)
def get_prompt_cache() -> PromptTemplateCache:
    return PromptTemplateCache(ttl_seconds=settings.PROMPT_CACHE_TTL_SECONDS)


def get_store_client() -> Optional[StoreClient]:
    if not settings.store_configured:
        return None
    return StoreClient(base_url=settings.SUPABASE_URL, api_key=settings.SUPABASE_KEY)


def get_knowledge_base_repository() -> KnowledgeBaseRepository:
    return KnowledgeBaseRepository(get_store_client())


def get_hazard_analysis_service() -> HazardAnalysisService:
    return HazardAnalysisService(
        get_knowledge_base_repository(), get_index_registry(), ReportRepository()
    )


def get_knowledge_base_service() -> KnowledgeBaseService:
    return KnowledgeBaseService(get_knowledge_base_repository(), get_index_registry())


def get_prompt_service() -> PromptService:
    store = get_store_client()
    prompts = PromptRepository(store) if store is not None else None
    return PromptService(prompts, get_prompt_cache())


def get_api_key_validator() -> ApiKeyValidationService:
    return ApiKeyValidationService()


async def enforce_max_upload_size(
    request: Request, file: UploadFile = File(...)
) -> UploadFile:
    # Fast pre-check via Content-Length if present
    MAX_BYTES = settings.MAX_FILE_MB * 1024 * 1024
    cl = request.headers.get("content-length")
    if cl and int(cl) > MAX_BYTES:
        raise HTTPException(
            status_code=413,
            detail={
                "ok": False,
                "error": "file_too_large",
                "maxMb": settings.MAX_FILE_MB,
            },
        )

    # Hard cap while reading initial bytes (works even if no Content-Length)
    blob = await file.read(MAX_BYTES + 1)
    if len(blob) > MAX_BYTES:
        raise HTTPException(
            status_code=413,
            detail={
                "ok": False,
                "error": "file_too_large",
                "maxMb": settings.MAX_FILE_MB,
            },
        )

    # Reset so downstream can re-read file stream
    await file.seek(0)
    return file
