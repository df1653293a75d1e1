"""Object storage client for a Supabase-compatible storage API.

Buckets:
- product-images: listing photos
- team-images: team member portraits
- profile-images: avatars and seller verification selfies

Objects are path-addressed within a bucket; public URLs are derived
from the base URL without a network call.
"""

import logging

import httpx

from omnimall.errors import DependencyError, NotConfiguredError
from omnimall.settings import get_settings

logger = logging.getLogger("uvicorn.error")


class StorageClient:
    """Client for bucket upload, public URL resolution and delete."""

    def __init__(
        self,
        base_url: str | None = None,
        service_key: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url if base_url is not None else settings.storage_url).rstrip("/")
        self.service_key = service_key if service_key is not None else settings.storage_service_key
        self._http_client = http_client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=30.0)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    def _require_config(self) -> None:
        if not self.base_url or not self.service_key:
            logger.error("Storage credentials (STORAGE_URL / STORAGE_SERVICE_KEY) are not configured")
            raise NotConfiguredError("Storage service is not configured.")

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.service_key}",
            "apikey": self.service_key,
        }

    async def upload(
        self,
        bucket: str,
        path: str,
        content: bytes,
        content_type: str = "application/octet-stream",
        upsert: bool = False,
    ) -> str:
        """Upload bytes to `bucket/path`.

        Returns:
            The object path within the bucket.

        Raises:
            NotConfiguredError: If storage credentials are missing.
            DependencyError: On transport failure or non-2xx response.
        """
        self._require_config()
        client = await self._get_client()
        headers = self._headers()
        headers["Content-Type"] = content_type
        headers["x-upsert"] = "true" if upsert else "false"

        url = f"{self.base_url}/storage/v1/object/{bucket}/{path}"
        try:
            resp = await client.post(url, content=content, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Storage upload transport error for {bucket}/{path}: {e}")
            raise DependencyError(f"Upload failed: {e}") from e

        if resp.status_code >= 300:
            logger.error(f"Storage upload error: {resp.status_code} - {resp.text[:200]}")
            raise DependencyError(
                f"Upload failed with status {resp.status_code}",
                detail={"bucket": bucket, "path": path},
            )
        logger.info(f"Uploaded {len(content)} bytes to {bucket}/{path}")
        return path

    def public_url(self, bucket: str, path: str) -> str:
        """Publicly resolvable URL for an object."""
        return f"{self.base_url}/storage/v1/object/public/{bucket}/{path}"

    async def remove(self, bucket: str, paths: list[str]) -> None:
        """Delete objects by path.

        Raises:
            DependencyError: On transport failure or non-2xx response.
        """
        if not paths:
            return
        self._require_config()
        client = await self._get_client()
        url = f"{self.base_url}/storage/v1/object/{bucket}"
        try:
            resp = await client.request("DELETE", url, json={"prefixes": paths}, headers=self._headers())
        except httpx.HTTPError as e:
            raise DependencyError(f"Delete failed: {e}") from e

        if resp.status_code >= 300:
            logger.error(f"Storage delete error: {resp.status_code} - {resp.text[:200]}")
            raise DependencyError(
                f"Delete failed with status {resp.status_code}",
                detail={"bucket": bucket, "paths": paths},
            )
        logger.info(f"Removed {len(paths)} object(s) from {bucket}")
