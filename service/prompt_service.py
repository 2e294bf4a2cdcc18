# service/prompt_service.py
import logging
from typing import Optional
from model.prompt import PromptTemplateResponse, PromptValidationResult, SystemPrompt
from repository.prompt_cache import PromptTemplateCache
from repository.prompt_repository import PromptRepository
from util.enums import ErrorMessage
from util.errors import AppError, StoreError

logger = logging.getLogger(__name__)


def validate_prompt(prompt: SystemPrompt, template: str) -> PromptValidationResult:
    """
    Errors: below min length, missing required placeholder.
    Warnings: documented placeholder not used.
    """
    errors: list[str] = []
    warnings: list[str] = []
    rules = prompt.validation_rules

    if rules.min_length and len(template) < rules.min_length:
        errors.append(f"Prompt harus minimal {rules.min_length} karakter")

    for placeholder in rules.required_placeholders or []:
        if placeholder not in template:
            errors.append(f"Placeholder wajib hilang: {placeholder}")

    for placeholder in prompt.placeholders:
        if placeholder not in template:
            warnings.append(f"Placeholder opsional tidak digunakan: {placeholder}")

    return PromptValidationResult(isValid=not errors, errors=errors, warnings=warnings)


class PromptService:
    def __init__(
        self, prompts: Optional[PromptRepository], cache: PromptTemplateCache
    ) -> None:
        self._prompts = prompts
        self._cache = cache

    def _repo(self) -> PromptRepository:
        if self._prompts is None:
            raise AppError.of(ErrorMessage.STORE_NOT_CONFIGURED)
        return self._prompts

    async def _load(self, prompt_id: str) -> SystemPrompt:
        try:
            prompt = await self._repo().get(prompt_id)
        except StoreError as e:
            logger.error("prompt.fetch.error id=%s", prompt_id)
            raise AppError.of(ErrorMessage.STORE_ERROR, str(e))
        if prompt is None:
            raise AppError.of(ErrorMessage.PROMPT_NOT_FOUND, prompt_id)
        return prompt

    async def list(self) -> list[SystemPrompt]:
        try:
            return await self._repo().list()
        except StoreError as e:
            raise AppError.of(ErrorMessage.STORE_ERROR, str(e))

    async def get_template(self, prompt_id: str) -> PromptTemplateResponse:
        cached = self._cache.get(prompt_id)
        if cached is not None:
            logger.info("prompt.cache.hit id=%s", prompt_id)
            return PromptTemplateResponse(
                promptId=prompt_id, promptTemplate=cached, source="cache"
            )

        prompt = await self._load(prompt_id)
        if not prompt.is_active:
            raise AppError.of(ErrorMessage.PROMPT_INACTIVE, prompt_id)

        self._cache.set(prompt_id, prompt.prompt_template)
        logger.info("prompt.fetch.ok id=%s", prompt_id)
        return PromptTemplateResponse(
            promptId=prompt_id, promptTemplate=prompt.prompt_template, source="database"
        )

    async def validate(self, prompt_id: str, template: str) -> PromptValidationResult:
        return validate_prompt(await self._load(prompt_id), template)

    async def update_template(self, prompt_id: str, template: str) -> SystemPrompt:
        prompt = await self._load(prompt_id)
        report = validate_prompt(prompt, template)
        if not report.isValid:
            logger.warning("prompt.update.invalid id=%s errors=%d", prompt_id, len(report.errors))
            raise AppError.of(ErrorMessage.PROMPT_INVALID, "; ".join(report.errors))

        return await self._save(prompt, template)

    async def reset_to_default(self, prompt_id: str) -> SystemPrompt:
        prompt = await self._load(prompt_id)
        return await self._save(prompt, prompt.default_template)

    async def _save(self, prompt: SystemPrompt, template: str) -> SystemPrompt:
        prompt_id = prompt.id
        try:
            saved = await self._repo().update_template(prompt_id, template)
        except StoreError as e:
            logger.error("prompt.update.error id=%s", prompt_id)
            raise AppError.of(ErrorMessage.STORE_ERROR, str(e))
        finally:
            self._cache.invalidate(prompt_id)

        logger.info("prompt.update.ok id=%s chars=%d", prompt_id, len(template))
        return saved or prompt.model_copy(update={"prompt_template": template})
