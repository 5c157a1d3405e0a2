import asyncio
import json
import math
from typing import Any, List, Optional, Tuple
from urllib.parse import quote

import aiohttp
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from dextract.config import CloudflareKVConfig
from dextract.exceptions import CloudflareKVError
from dextract.utils.logging import get_logger
from .base import SENTINEL, CacheEntry, DataStore

logger = get_logger(__name__)

# Workers KV rejects expiration_ttl values below 60 seconds
MIN_KV_TTL = 60
# Bulk delete accepts up to 10,000 keys per request
BULK_DELETE_LIMIT = 10000

# ValueError covers undecodable listing payloads
BACKEND_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, CloudflareKVError, ValueError)


def _is_transient(e: BaseException) -> bool:
    if isinstance(e, CloudflareKVError):
        return e.status is not None and (e.status == 429 or e.status >= 500)
    return isinstance(e, (aiohttp.ClientError, asyncio.TimeoutError))


def _log_retry(retry_state) -> None:
    logger.warning(
        f"Retrying Cloudflare KV request (attempt {retry_state.attempt_number}): "
        f"{retry_state.outcome.exception()}"
    )


class CloudflareKVStore(DataStore):
    """Production store on Cloudflare Workers KV, through its REST API.

    Known limitation: KV has no native "clear". `clear` lists keys by prefix,
    page by page, and stops after `max_list_pages` pages of `list_page_limit`
    keys. If keys remain past that cap it logs a warning and returns False so
    callers can tell the namespace was only partially cleared.
    """

    def __init__(
        self,
        config: CloudflareKVConfig,
        default_ttl: Optional[float] = DataStore.DEFAULT_TTL,
        timeout: float = 10.0,
    ):
        super().__init__(default_ttl)
        self.config = config
        self.base_url = (
            f"{config.api_base.rstrip('/')}/accounts/{config.account_id}"
            f"/storage/kv/namespaces/{config.namespace_id}"
        )
        self.headers = {"Authorization": f"Bearer {config.api_token}"}
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.session: Optional[aiohttp.ClientSession] = None
        logger.info("Initializing Cloudflare KV store")

    async def __aenter__(self):
        if not self.session or self.session.closed:
            self.session = aiohttp.ClientSession(headers=self.headers, timeout=self.timeout)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, max=5),
        retry=retry_if_exception(_is_transient),
        before_sleep=_log_retry,
        reraise=True,
    )
    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        data: Optional[str] = None,
        json_body: Any = None,
        allow_404: bool = False,
    ) -> Optional[str]:
        if not self.session or self.session.closed:
            self.session = aiohttp.ClientSession(headers=self.headers, timeout=self.timeout)

        async with self.session.request(
            method, f"{self.base_url}{path}", params=params, data=data, json=json_body
        ) as response:
            if response.status == 404 and allow_404:
                return None
            text = await response.text()
            if response.status >= 400:
                raise CloudflareKVError(
                    f"Cloudflare KV {method} {path} failed: {response.status} {text}",
                    status=response.status,
                )
            return text

    def _value_path(self, full_key: str) -> str:
        return f"/values/{quote(full_key, safe='')}"

    async def get(self, key: str, namespace: Optional[str] = None) -> Optional[Any]:
        full_key = self.full_key(key, namespace)
        try:
            raw = await self._request("GET", self._value_path(full_key), allow_404=True)
        except BACKEND_ERRORS as e:
            logger.error(f"Error getting value for key {full_key}: {e}")
            return None

        if raw is None:
            return None

        try:
            entry = CacheEntry.model_validate_json(raw)
        except ValueError as e:
            logger.error(f"Corrupt cache entry for key {full_key}: {e}")
            return None

        if entry.is_expired():
            await self.delete(key, namespace=namespace)
            return None

        return entry.value

    async def set(self, key: str, value: Any, namespace: Optional[str] = None, ttl=SENTINEL) -> bool:
        full_key = self.full_key(key, namespace)
        entry = self._make_entry(value, ttl)

        params = None
        if entry.expires_at is not None:
            ttl_seconds = self.default_ttl if ttl is SENTINEL else ttl
            params = {"expiration_ttl": str(max(MIN_KV_TTL, math.ceil(ttl_seconds)))}

        try:
            await self._request(
                "PUT", self._value_path(full_key), params=params, data=entry.model_dump_json()
            )
            return True
        except BACKEND_ERRORS as e:
            logger.error(f"Error setting value for key {full_key}: {e}")
            return False

    async def delete(self, key: str, namespace: Optional[str] = None) -> bool:
        full_key = self.full_key(key, namespace)
        try:
            await self._request("DELETE", self._value_path(full_key), allow_404=True)
            return True
        except BACKEND_ERRORS as e:
            logger.error(f"Error deleting key {full_key}: {e}")
            return False

    async def _list_keys(self, prefix: str) -> Tuple[List[str], bool]:
        """Key names under a prefix and whether the listing was complete."""
        names: List[str] = []
        cursor = None

        for _ in range(self.config.max_list_pages):
            params = {"prefix": prefix, "limit": str(self.config.list_page_limit)}
            if cursor:
                params["cursor"] = cursor

            payload = json.loads(await self._request("GET", "/keys", params=params))
            names.extend(item["name"] for item in payload.get("result", []))

            cursor = (payload.get("result_info") or {}).get("cursor")
            if not cursor:
                return names, True

        return names, False

    async def clear(self, namespace: Optional[str] = None) -> bool:
        prefix = f"{namespace or self.DEFAULT_NAMESPACE}:"
        try:
            names, complete = await self._list_keys(prefix)

            for start in range(0, len(names), BULK_DELETE_LIMIT):
                await self._request(
                    "POST", "/bulk/delete", json_body=names[start:start + BULK_DELETE_LIMIT]
                )
        except BACKEND_ERRORS as e:
            logger.error(f"Error clearing namespace {prefix}: {e}")
            return False

        if not complete:
            logger.warning(
                f"Cleared only the first {len(names)} keys of namespace {prefix}; "
                f"listing is capped at {self.config.max_list_pages} pages"
            )
            return False

        return True
