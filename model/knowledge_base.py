# model/knowledge_base.py
from pydantic import BaseModel, ConfigDict, Field, field_validator


class KnowledgeBaseSummary(BaseModel):
    id: str
    name: str
    color: str = ""
    description: str | None = None


class KnowledgeBaseConfig(KnowledgeBaseSummary):
    """
    Read-only input to the RAG core. Store rows use snake_case
    (`prompt_template`); the API speaks camelCase.
    """

    model_config = ConfigDict(populate_by_name=True)

    content: str = ""
    promptTemplate: str = Field(default="", alias="prompt_template")

    @field_validator("color", "content", "promptTemplate", mode="before")
    @classmethod
    def _null_as_empty(cls, v):
        # nullable text columns in the store
        return "" if v is None else v

    def summary(self) -> KnowledgeBaseSummary:
        return KnowledgeBaseSummary(
            id=self.id, name=self.name, color=self.color, description=self.description
        )
