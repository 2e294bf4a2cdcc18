# repository/store_client.py
from typing import Any, Dict, List, Optional
import httpx
from config.settings import settings
from util.constants import ExternalURIs
from util.errors import StoreError
import logging

logger = logging.getLogger(__name__)


class StoreClient:
    """
    Minimal PostgREST client for the relational store (select / update by key).
    """

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        timeout: float = settings.STORE_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base = base_url.rstrip("/")
        self._key = api_key
        self._timeout = timeout
        self._transport = transport

    def _url(self, table: str) -> str:
        return ExternalURIs.REST.format(base=self._base, table=table)

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self._key,
            "Authorization": f"Bearer {self._key}",
            "Content-Type": "application/json",
        }

    async def _request(
        self,
        method: str,
        table: str,
        *,
        params: Dict[str, str],
        json: Any = None,
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> List[Dict[str, Any]]:
        headers = self._headers()
        if extra_headers:
            headers.update(extra_headers)
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                res = await client.request(
                    method, self._url(table), params=params, headers=headers, json=json
                )
        except httpx.HTTPError as e:
            logger.error("store.request_error table=%s err=%s", table, type(e).__name__)
            raise StoreError(f"Store request failed: {type(e).__name__}") from e

        if res.status_code // 100 != 2:
            logger.error("store.bad_status table=%s %d", table, res.status_code)
            raise StoreError(
                f"Store error: {res.status_code} {res.reason_phrase}", res.status_code
            )
        try:
            data = res.json()
        except ValueError as e:
            raise StoreError("Store returned invalid JSON") from e
        return data if isinstance(data, list) else [data]

    async def select(
        self, table: str, *, filters: Optional[Dict[str, str]] = None, order: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        params = {"select": "*"}
        for col, value in (filters or {}).items():
            params[col] = f"eq.{value}"
        if order:
            params["order"] = order
        return await self._request("GET", table, params=params)

    async def update(
        self, table: str, *, key: Dict[str, str], values: Dict[str, Any]
    ) -> List[Dict[str, Any]]:
        params = {col: f"eq.{value}" for col, value in key.items()}
        return await self._request(
            "PATCH",
            table,
            params=params,
            json=values,
            extra_headers={"Prefer": "return=representation"},
        )
