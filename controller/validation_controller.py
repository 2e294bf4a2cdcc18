# controller/validation_controller.py
from fastapi import APIRouter, Depends
from model.api import ValidateKeyRequest, ValidateKeyResponse
from service.api_key_validation_service import ApiKeyValidationService
from util.constants import InternalURIs
from controller.controller_dependencies import get_api_key_validator, rate_limiter

validation_router = APIRouter(dependencies=[Depends(rate_limiter)])


@validation_router.post(InternalURIs.VALIDATE_API_KEY, response_model=ValidateKeyResponse)
async def validate_api_key(
    payload: ValidateKeyRequest,
    validator: ApiKeyValidationService = Depends(get_api_key_validator),
) -> ValidateKeyResponse:
    # 401 / 502 surface as AppError from the service
    await validator.validate_key(payload.apiKey)
    return ValidateKeyResponse(ok=True)
