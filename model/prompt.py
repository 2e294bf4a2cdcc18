# model/prompt.py
from pydantic import BaseModel, Field


class ValidationRules(BaseModel):
    required_placeholders: list[str] | None = None
    min_length: int | None = None


class SystemPrompt(BaseModel):
    id: str
    name: str
    category: str
    prompt_template: str
    default_template: str
    placeholders: list[str] = Field(default_factory=list)
    validation_rules: ValidationRules = Field(default_factory=ValidationRules)
    description: str | None = None
    is_active: bool = True
    created_at: str | None = None
    updated_at: str | None = None


class PromptTemplateResponse(BaseModel):
    promptId: str
    promptTemplate: str
    source: str  # "cache" | "database"


class UpdatePromptRequest(BaseModel):
    promptTemplate: str = Field(min_length=1)


class PromptValidationResult(BaseModel):
    isValid: bool
    errors: list[str]
    warnings: list[str]
