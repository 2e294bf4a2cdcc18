# repository/prompt_repository.py
from typing import Final, List, Optional
from model.prompt import SystemPrompt
from repository.store_client import StoreClient
from util import functions

TABLE: Final[str] = "system_prompts"


class PromptRepository:
    """
    `system_prompts` rows. Updates are read-modify-write; `updated_at` is
    stamped here, not by the caller.
    """

    def __init__(self, store: StoreClient) -> None:
        self._store = store

    async def list(self) -> List[SystemPrompt]:
        rows = await self._store.select(TABLE, order="category.asc")
        return [SystemPrompt.model_validate(r) for r in rows]

    async def get(self, prompt_id: str) -> Optional[SystemPrompt]:
        rows = await self._store.select(TABLE, filters={"id": prompt_id})
        return SystemPrompt.model_validate(rows[0]) if rows else None

    async def update_template(self, prompt_id: str, template: str) -> Optional[SystemPrompt]:
        rows = await self._store.update(
            TABLE,
            key={"id": prompt_id},
            values={"prompt_template": template, "updated_at": functions.utc_now_iso()},
        )
        return SystemPrompt.model_validate(rows[0]) if rows else None
