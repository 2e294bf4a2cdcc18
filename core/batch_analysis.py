# core/batch_analysis.py
import asyncio
from typing import Final, List, Optional, Sequence
from core.entities import AnalysisSpec, BatchItemResult, BatchResult, ThinkingStep
from core.gemini_client import GeminiGenerationClient
from core.prompt_composer import NO_CONTEXT, NO_HAZARD_DESCRIPTION, compose
from core.response_parser import normalize_reply, parse_response
from util import functions
from util.errors import GenerationError
from util.timing import Stopwatch, timed
import logging

logger = logging.getLogger(__name__)

ERROR_CATEGORY: Final[str] = "Error"
ERROR_CONFIDENCE: Final[str] = "0%"


def _error_item(
    spec: AnalysisSpec,
    error: BaseException,
    processing_time: int,
    steps: Optional[List[ThinkingStep]] = None,
) -> BatchItemResult:
    return BatchItemResult(
        knowledge_base_id=spec.knowledge_base_id,
        knowledge_base_name=spec.knowledge_base_name,
        category=ERROR_CATEGORY,
        confidence=ERROR_CONFIDENCE,
        reasoning=f"Analysis failed: {str(error) or type(error).__name__}",
        color=spec.color,
        processing_time=processing_time,
        thinking_steps=list(steps or []),
    )


async def _analyze_one(
    position: int,
    total: int,
    hazard_description: str,
    spec: AnalysisSpec,
    generator: GeminiGenerationClient,
) -> BatchItemResult:
    watch = Stopwatch()
    steps: List[ThinkingStep] = []
    try:
        # 1) prompt
        t = Stopwatch()
        if not spec.prompt_template:
            raise ValueError("Prompt template is missing")
        safe_context = spec.retrieved_context or NO_CONTEXT
        safe_hazard = hazard_description or NO_HAZARD_DESCRIPTION
        prompt = compose(spec.prompt_template, safe_context, safe_hazard)
        steps.append(
            ThinkingStep(
                step=1,
                name="Konstruksi Prompt",
                description="Menggabungkan context + hazard description ke dalam template prompt",
                duration=t.elapsed_ms(),
                details={
                    "template": functions.preview(spec.prompt_template),
                    "contextLength": len(safe_context),
                    "hazardLength": len(safe_hazard),
                    "promptLength": len(prompt),
                },
            )
        )

        # 2) generation
        logger.info(
            "batch.item.send %d/%d kb=%s", position + 1, total, spec.knowledge_base_id
        )
        t = Stopwatch()
        call_details = {
            "model": generator.model,
            "temperature": generator.temperature,
            "maxOutputTokens": generator.max_output_tokens,
        }
        try:
            output = await generator.generate(prompt)
        except GenerationError as e:
            steps.append(
                ThinkingStep(
                    step=2,
                    name="Gemini API Call",
                    description="Mengirim prompt ke Gemini untuk dianalisis",
                    duration=t.elapsed_ms(),
                    details={**call_details, "statusCode": e.status_code},
                    status="error",
                )
            )
            raise
        steps.append(
            ThinkingStep(
                step=2,
                name="Gemini API Call",
                description="Mengirim prompt ke Gemini untuk dianalisis",
                duration=t.elapsed_ms(),
                details={
                    **call_details,
                    "statusCode": output.status_code,
                    "finishReason": output.finish_reason,
                },
            )
        )

        # 3) parse
        t = Stopwatch()
        full_response, partial = normalize_reply(output)
        if partial:
            logger.warning(
                "batch.item.partial kb=%s finish=%s",
                spec.knowledge_base_id,
                output.finish_reason,
            )
        parsed = parse_response(full_response, partial=partial)
        steps.append(
            ThinkingStep(
                step=3,
                name="Parse AI Response",
                description="Ekstrak kategori, confidence, dan reasoning dari jawaban AI",
                duration=t.elapsed_ms(),
                details={
                    "rawResponseLength": len(full_response),
                    "extractedFields": {
                        "category": parsed.category,
                        "confidence": parsed.confidence,
                        "reasoning": functions.preview(parsed.reasoning),
                    },
                    "isPartial": partial,
                },
            )
        )
    except Exception as e:
        elapsed = watch.elapsed_ms()
        logger.error(
            "batch.item.error kb=%s ms=%d err=%s", spec.knowledge_base_id, elapsed, e
        )
        return _error_item(spec, e, elapsed, steps)

    elapsed = watch.elapsed_ms()
    logger.info("batch.item.done kb=%s ms=%d", spec.knowledge_base_id, elapsed)
    return BatchItemResult(
        knowledge_base_id=spec.knowledge_base_id,
        knowledge_base_name=spec.knowledge_base_name,
        category=parsed.category,
        confidence=parsed.confidence,
        reasoning=parsed.reasoning,
        color=spec.color,
        processing_time=elapsed,
        thinking_steps=steps,
    )


async def run_batch(
    *,
    hazard_description: str,
    analyses: Sequence[AnalysisSpec],
    generator: GeminiGenerationClient,
    concurrency: Optional[int] = None,
) -> BatchResult:
    """
    Analyze one hazard against N knowledge bases whose context was already
    retrieved upstream. All items are in flight together (or `concurrency` at
    a time) and every item settles before returning. results[i] always belongs
    to analyses[i]; a failed item is an in-band "Error" record.
    """
    watch = Stopwatch()
    total = len(analyses)
    sem = asyncio.Semaphore(concurrency) if concurrency and concurrency > 0 else None
    logger.info("batch.start n=%d conc=%s", total, concurrency or "all")

    async def _slot(position: int, spec: AnalysisSpec) -> BatchItemResult:
        if sem is None:
            return await _analyze_one(
                position, total, hazard_description, spec, generator
            )
        async with sem:
            return await _analyze_one(
                position, total, hazard_description, spec, generator
            )

    with timed(logger, "batch.all", n=total):
        outcomes = await asyncio.gather(
            *(_slot(i, spec) for i, spec in enumerate(analyses)),
            return_exceptions=True,
        )

    results: List[BatchItemResult] = []
    for spec, outcome in zip(analyses, outcomes):
        if isinstance(outcome, BaseException):
            logger.error(
                "batch.item.crash kb=%s err=%s", spec.knowledge_base_id, outcome
            )
            results.append(_error_item(spec, outcome, watch.elapsed_ms()))
        else:
            results.append(outcome)

    batch = BatchResult(results=results, total_processing_time=watch.elapsed_ms())
    logger.info(
        "batch.done ok=%d/%d ms=%d", batch.succeeded, total, batch.total_processing_time
    )
    return batch
