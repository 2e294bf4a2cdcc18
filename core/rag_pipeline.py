# core/rag_pipeline.py
from typing import Protocol
from core.entities import AnalysisResult, GenerationOutput
from core.prompt_composer import build_context_text, compose
from core.response_parser import normalize_reply, parse_response
from core.similarity_index import Embedder, SimilarityIndex
from util.errors import AnalysisError
from util.timing import Stopwatch, timed
import logging

logger = logging.getLogger(__name__)


class Generator(Protocol):
    async def generate(self, prompt: str) -> GenerationOutput: ...


async def analyze_hazard(
    *,
    hazard_description: str,
    knowledge_base_text: str,
    prompt_template: str,
    index: SimilarityIndex,
    embedder: Embedder,
    generator: Generator,
    top_k: int = 3,
) -> AnalysisResult:
    """
    One hazard against one knowledge base:
    1) (Re)build the index if it does not hold this text yet
    2) Retrieve top-k chunks
    3) Fill the template
    4) Generate
    5) Parse KATEGORI / CONFIDENCE / ALASAN
    Any failure surfaces as a single AnalysisError; no partial result.
    """
    watch = Stopwatch()
    try:
        with timed(logger, "rag.pipeline", k=top_k):
            await index.build(knowledge_base_text, embedder)

            with timed(logger, "rag.retrieve", k=top_k):
                retrieved = await index.retrieve(
                    hazard_description, embedder, top_k=top_k
                )

            prompt = compose(
                prompt_template, build_context_text(retrieved), hazard_description
            )
            output = await generator.generate(prompt)
            full_response, partial = normalize_reply(output)
            parsed = parse_response(full_response, partial=partial)
    except Exception as e:
        elapsed = watch.elapsed_ms()
        cause = str(e) or type(e).__name__
        logger.error("rag.pipeline.error ms=%d err=%s", elapsed, cause)
        raise AnalysisError(cause, elapsed) from e

    result = AnalysisResult(
        category=parsed.category,
        confidence=parsed.confidence,
        reasoning=parsed.reasoning,
        retrieved_context=retrieved,
        full_response=full_response,
        processing_time=watch.elapsed_ms(),
    )
    logger.info(
        "rag.result category=%s partial=%s ms=%d",
        result.category,
        parsed.partial,
        result.processing_time,
    )
    return result
