# repository/report_repository.py
from typing import Final, Optional
from redis.asyncio import Redis
from config.cache import get_redis
from config.settings import settings
from model.api import BatchReport
from repository.namespaces import REPORTS

KEY_PREFIX: Final[str] = REPORTS


class ReportRepository:
    """
    Flow:
    - Persist each batch analysis report under its reportId.
    - TTL refreshed on read so reports stay available while someone looks at them.
    """

    def __init__(self, ttl_seconds: int = settings.REPORT_TTL_SECONDS) -> None:
        self._ttl = int(ttl_seconds)

    @staticmethod
    async def _client() -> Redis:
        return await get_redis()

    @staticmethod
    def _key(report_id: str) -> str:
        return f"{KEY_PREFIX}:{report_id}"

    async def save(self, report: BatchReport) -> None:
        r = await self._client()
        payload = report.model_dump_json(exclude_none=True).encode("utf-8")
        await r.set(self._key(report.reportId), payload, ex=self._ttl)

    async def get(self, report_id: str) -> Optional[BatchReport]:
        if not report_id:
            return None
        r = await self._client()
        raw = await r.get(self._key(report_id))
        if raw is None:
            return None
        try:
            obj = BatchReport.model_validate_json(raw)
        finally:
            await r.expire(self._key(report_id), self._ttl)
        return obj
