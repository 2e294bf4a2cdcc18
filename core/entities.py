# core/entities.py
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any


@dataclass(frozen=True)
class DocumentChunk:
    """
    Retrievable unit of knowledge-base text.

    `embedding` is None when embedding generation failed for this chunk;
    `similarity` is only set on copies returned by a retrieval query.
    """

    text: str
    embedding: Optional[List[float]] = None
    similarity: Optional[float] = None


@dataclass(frozen=True)
class GenerationOutput:
    """`text` is None when the candidate had no recognisable text field."""

    text: Optional[str]
    finish_reason: Optional[str] = None
    status_code: int = 200

    @property
    def truncated(self) -> bool:
        return self.finish_reason == "MAX_TOKENS"


@dataclass(frozen=True)
class ParsedResponse:
    category: str
    confidence: str
    reasoning: str
    partial: bool = False


@dataclass(frozen=True)
class AnalysisResult:
    category: str
    confidence: str
    reasoning: str
    retrieved_context: List[DocumentChunk]
    full_response: str
    processing_time: int  # ms


@dataclass(frozen=True)
class AnalysisSpec:
    knowledge_base_id: str
    knowledge_base_name: str
    color: str
    retrieved_context: Optional[str]
    prompt_template: Optional[str]


@dataclass
class ThinkingStep:
    step: int
    name: str
    description: str
    duration: int
    details: Dict[str, Any]
    status: str = "success"


@dataclass(frozen=True)
class BatchItemResult:
    knowledge_base_id: str
    knowledge_base_name: str
    category: str
    confidence: str
    reasoning: str
    color: str
    processing_time: int
    thinking_steps: List[ThinkingStep] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.category == "Error"


@dataclass(frozen=True)
class BatchResult:
    results: List[BatchItemResult]
    total_processing_time: int

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if not r.failed)
