# model/api.py
from typing import Any, Literal
from pydantic import BaseModel, Field
from model.knowledge_base import KnowledgeBaseSummary


class ValidateKeyRequest(BaseModel):
    apiKey: str = Field(min_length=1)


class ValidateKeyResponse(BaseModel):
    ok: bool


class ChunkOut(BaseModel):
    text: str
    similarity: float | None = None
    hasEmbedding: bool | None = None


class KnowledgeBaseListResponse(BaseModel):
    knowledgeBases: list[KnowledgeBaseSummary]


class ChunkPreviewResponse(BaseModel):
    knowledgeBaseId: str
    indexed: bool
    chunks: list[ChunkOut]


class InvalidateResponse(BaseModel):
    knowledgeBaseId: str
    cleared: bool


class ExtractTextResponse(BaseModel):
    fileName: str | None = None
    characters: int
    content: str
    chunks: list[ChunkOut]


class RetrieveContextRequest(BaseModel):
    hazardDescription: str = Field(min_length=1)
    knowledgeBaseIds: list[str] | None = None  # None -> all knowledge bases
    topK: int = Field(default=3, ge=1, le=20)
    apiKey: str | None = None


class RetrievedContext(BaseModel):
    knowledgeBaseId: str
    knowledgeBaseName: str
    color: str
    chunks: list[ChunkOut]
    contextText: str


class RetrieveContextResponse(BaseModel):
    contexts: list[RetrievedContext]


class AnalyzeHazardRequest(BaseModel):
    hazardDescription: str = Field(min_length=1)
    knowledgeBaseId: str
    apiKey: str | None = None


class AnalyzeHazardResponse(BaseModel):
    knowledgeBaseId: str
    knowledgeBaseName: str
    category: str
    confidence: str
    reasoning: str
    retrievedContext: list[ChunkOut]
    fullResponse: str
    processingTime: int
    color: str
    source: Literal["rag", "fallback"] = "rag"
    riskLevel: str | None = None
    dueDateSuggestion: int | None = None
    error: str | None = None


class AnalysisItem(BaseModel):
    knowledgeBaseId: str
    knowledgeBaseName: str
    color: str = ""
    # null context / template degrade inside the item, not at validation
    retrievedContext: str | None = None
    promptTemplate: str | None = None


class BatchAnalysisRequest(BaseModel):
    hazardDescription: str | None = None
    analyses: list[AnalysisItem]


class ThinkingStepOut(BaseModel):
    step: int
    name: str
    description: str
    duration: int
    details: dict[str, Any]
    status: str


class BatchResultItem(BaseModel):
    knowledgeBaseId: str
    knowledgeBaseName: str
    category: str
    confidence: str
    reasoning: str
    color: str
    processingTime: int
    thinkingSteps: list[ThinkingStepOut] | None = None


class BatchAnalysisResponse(BaseModel):
    results: list[BatchResultItem]
    totalProcessingTime: int
    reportId: str | None = None


class AnalyzeAllRequest(BaseModel):
    hazardDescription: str = Field(min_length=1)
    knowledgeBaseIds: list[str] | None = None
    apiKey: str | None = None


class BatchReport(BaseModel):
    reportId: str
    createdAt: str
    hazardDescription: str
    results: list[BatchResultItem]
    totalProcessingTime: int
