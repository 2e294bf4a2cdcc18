# repository/knowledge_base_repository.py
from typing import Dict, Final, List, Optional
from pydantic import ValidationError
from model.knowledge_base import KnowledgeBaseConfig
from repository.default_knowledge_bases import DEFAULT_KNOWLEDGE_BASES
from repository.store_client import StoreClient
import logging

logger = logging.getLogger(__name__)

TABLE: Final[str] = "knowledge_bases"


class KnowledgeBaseRepository:
    """
    Read-only knowledge-base lookups.

    With a store client, rows come from the `knowledge_bases` table ordered by
    name; without one, the built-in defaults are served.
    """

    def __init__(
        self,
        store: Optional[StoreClient] = None,
        defaults: Dict[str, KnowledgeBaseConfig] = DEFAULT_KNOWLEDGE_BASES,
    ) -> None:
        self._store = store
        self._defaults = defaults

    @staticmethod
    def _parse(row: dict) -> Optional[KnowledgeBaseConfig]:
        try:
            return KnowledgeBaseConfig.model_validate(row)
        except ValidationError:
            logger.warning("kb.row.invalid id=%s", row.get("id"))
            return None

    async def list(self) -> List[KnowledgeBaseConfig]:
        if self._store is None:
            return sorted(self._defaults.values(), key=lambda kb: kb.name)
        rows = await self._store.select(TABLE, order="name.asc")
        out = [kb for kb in (self._parse(r) for r in rows) if kb is not None]
        logger.info("kb.list count=%d", len(out))
        return out

    async def get(self, kb_id: str) -> Optional[KnowledgeBaseConfig]:
        if self._store is None:
            return self._defaults.get(kb_id)
        rows = await self._store.select(TABLE, filters={"id": kb_id})
        return self._parse(rows[0]) if rows else None
