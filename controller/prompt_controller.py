# controller/prompt_controller.py
from fastapi import APIRouter, Depends
from service.prompt_service import PromptService
from model.prompt import (
    PromptTemplateResponse,
    PromptValidationResult,
    SystemPrompt,
    UpdatePromptRequest,
)
from util.constants import InternalURIs
from controller.controller_dependencies import get_prompt_service, rate_limiter

prompt_router = APIRouter(dependencies=[Depends(rate_limiter)])


@prompt_router.get(InternalURIs.SYSTEM_PROMPTS, response_model=list[SystemPrompt])
async def list_prompts(service: PromptService = Depends(get_prompt_service)):
    return await service.list()


@prompt_router.get(InternalURIs.SYSTEM_PROMPT, response_model=PromptTemplateResponse)
async def get_prompt(
    prompt_id: str, service: PromptService = Depends(get_prompt_service)
) -> PromptTemplateResponse:
    return await service.get_template(prompt_id)


@prompt_router.put(InternalURIs.SYSTEM_PROMPT, response_model=SystemPrompt)
async def update_prompt(
    prompt_id: str,
    payload: UpdatePromptRequest,
    service: PromptService = Depends(get_prompt_service),
) -> SystemPrompt:
    return await service.update_template(prompt_id, payload.promptTemplate)


@prompt_router.post(InternalURIs.SYSTEM_PROMPT_RESET, response_model=SystemPrompt)
async def reset_prompt(
    prompt_id: str, service: PromptService = Depends(get_prompt_service)
) -> SystemPrompt:
    return await service.reset_to_default(prompt_id)


@prompt_router.post(InternalURIs.SYSTEM_PROMPT_VALIDATE, response_model=PromptValidationResult)
async def validate_prompt(
    prompt_id: str,
    payload: UpdatePromptRequest,
    service: PromptService = Depends(get_prompt_service),
) -> PromptValidationResult:
    return await service.validate(prompt_id, payload.promptTemplate)
