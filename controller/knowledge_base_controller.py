# controller/knowledge_base_controller.py
from fastapi import APIRouter, Depends, File, UploadFile
from service.knowledge_base_service import KnowledgeBaseService
from model.api import (
    ChunkPreviewResponse,
    ExtractTextResponse,
    InvalidateResponse,
    KnowledgeBaseListResponse,
)
from util.constants import InternalURIs
from controller.controller_dependencies import (
    enforce_max_upload_size,
    get_knowledge_base_service,
    rate_limiter,
)

knowledge_base_router = APIRouter(dependencies=[Depends(rate_limiter)])


@knowledge_base_router.get(InternalURIs.KNOWLEDGE_BASES, response_model=KnowledgeBaseListResponse)
async def list_knowledge_bases(
    service: KnowledgeBaseService = Depends(get_knowledge_base_service),
) -> KnowledgeBaseListResponse:
    return KnowledgeBaseListResponse(knowledgeBases=await service.list())


@knowledge_base_router.get(InternalURIs.KNOWLEDGE_BASE_CHUNKS, response_model=ChunkPreviewResponse)
async def knowledge_base_chunks(
    kb_id: str,
    service: KnowledgeBaseService = Depends(get_knowledge_base_service),
) -> ChunkPreviewResponse:
    return await service.chunk_preview(kb_id)


@knowledge_base_router.post(InternalURIs.KNOWLEDGE_BASE_INVALIDATE, response_model=InvalidateResponse)
async def invalidate_knowledge_base(
    kb_id: str,
    service: KnowledgeBaseService = Depends(get_knowledge_base_service),
) -> InvalidateResponse:
    return service.invalidate(kb_id)


@knowledge_base_router.post(
    InternalURIs.EXTRACT_TEXT,
    response_model=ExtractTextResponse,
    dependencies=[Depends(enforce_max_upload_size)],
)
async def extract_text(
    file: UploadFile = File(...),
    service: KnowledgeBaseService = Depends(get_knowledge_base_service),
) -> ExtractTextResponse:
    return await service.extract_text(file)
