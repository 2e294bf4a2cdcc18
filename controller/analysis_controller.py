# controller/analysis_controller.py
import logging
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from service.hazard_analysis_service import HazardAnalysisService
from model.api import (
    AnalyzeAllRequest,
    AnalyzeHazardRequest,
    AnalyzeHazardResponse,
    BatchAnalysisRequest,
    BatchAnalysisResponse,
    BatchReport,
    RetrieveContextRequest,
    RetrieveContextResponse,
)
from util.constants import InternalURIs
from controller.controller_dependencies import get_hazard_analysis_service, rate_limiter

logger = logging.getLogger(__name__)

analysis_router = APIRouter(dependencies=[Depends(rate_limiter)])


BATCH_ROUTES = (InternalURIs.BATCH_ANALYSIS, InternalURIs.ANALYZE_ALL)


def _envelope(message: str) -> JSONResponse:
    # Top-level failure keeps the batch envelope so the UI can still render it
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": message or "Unknown error occurred",
            "results": [],
            "totalProcessingTime": 0,
        },
    )


def _batch_failure(e: Exception) -> JSONResponse:
    return _envelope(e.detail if isinstance(e, HTTPException) else str(e))


async def batch_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Unparseable or invalid bodies on the batch routes answer with the batch
    envelope; every other route keeps FastAPI's 422.
    """
    if request.url.path not in BATCH_ROUTES:
        return await request_validation_exception_handler(request, exc)
    errors = exc.errors()
    first = errors[0] if errors else {}
    where = ".".join(str(p) for p in first.get("loc", ()))
    message = f"Invalid request: {where} {first.get('msg', '')}".strip()
    logger.error("batch.invalid_body path=%s errors=%d", request.url.path, len(errors))
    return _envelope(message)


@analysis_router.post(InternalURIs.RETRIEVE_CONTEXT, response_model=RetrieveContextResponse)
async def retrieve_context(
    payload: RetrieveContextRequest,
    service: HazardAnalysisService = Depends(get_hazard_analysis_service),
) -> RetrieveContextResponse:
    return RetrieveContextResponse(contexts=await service.retrieve_contexts(payload))


@analysis_router.post(InternalURIs.ANALYZE_HAZARD, response_model=AnalyzeHazardResponse)
async def analyze_hazard(
    payload: AnalyzeHazardRequest,
    service: HazardAnalysisService = Depends(get_hazard_analysis_service),
) -> AnalyzeHazardResponse:
    return await service.analyze(payload)


@analysis_router.post(InternalURIs.BATCH_ANALYSIS, response_model=BatchAnalysisResponse)
async def batch_analysis(
    payload: BatchAnalysisRequest,
    service: HazardAnalysisService = Depends(get_hazard_analysis_service),
):
    try:
        return await service.run_batch(payload)
    except Exception as e:
        logger.error("batch.failed err=%s", e)
        return _batch_failure(e)


@analysis_router.post(InternalURIs.ANALYZE_ALL, response_model=BatchAnalysisResponse)
async def analyze_all(
    payload: AnalyzeAllRequest,
    service: HazardAnalysisService = Depends(get_hazard_analysis_service),
):
    try:
        return await service.analyze_all(payload)
    except Exception as e:
        logger.error("analyze_all.failed err=%s", e)
        return _batch_failure(e)


@analysis_router.get(InternalURIs.REPORT, response_model=BatchReport)
async def get_report(
    report_id: str,
    service: HazardAnalysisService = Depends(get_hazard_analysis_service),
) -> BatchReport:
    return await service.get_report(report_id)
