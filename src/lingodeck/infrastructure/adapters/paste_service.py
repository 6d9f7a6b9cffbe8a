import json
import logging
from typing import Any
from urllib.parse import quote

import httpx

from lingodeck.domain.constants import PASTE_API_URL, PASTE_EXPIRY_DAYS, REQUEST_TIMEOUT
from lingodeck.domain.errors import ExternalFetchError
from lingodeck.domain.ports import RemoteSnapshotStore


class PasteServiceStore(RemoteSnapshotStore):
    """
    Publishes snapshots to a dpaste-compatible paste service.

    The service answers an upload with the paste URL as plain text; the raw
    content is served at the same URL with a `.txt` suffix. An optional CORS
    style proxy prefix is supported for networks that block the service.
    """

    def __init__(
        self,
        api_url: str = PASTE_API_URL,
        proxy_url: str | None = None,
        expiry_days: int = PASTE_EXPIRY_DAYS,
        timeout: float = REQUEST_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        self.api_url = api_url
        self.proxy_url = proxy_url
        self.expiry_days = expiry_days
        self.timeout = timeout
        self._client = client
        self.logger = logging.getLogger(__name__)

    def _via_proxy(self, url: str) -> str:
        if not self.proxy_url:
            return url
        return self.proxy_url + quote(url, safe="")

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def upload(self, data: dict[str, Any]) -> str:
        form = {
            "content": json.dumps(data, ensure_ascii=False, indent=2),
            "syntax": "json",
            "expiry_days": str(self.expiry_days),
        }
        try:
            resp = await self._get_client().post(self._via_proxy(self.api_url), data=form)
        except httpx.HTTPError as e:
            self.logger.error(f"Snapshot upload failed: {e}")
            raise ExternalFetchError(f"Upload failed: {e}") from e

        if resp.is_error:
            raise ExternalFetchError(f"Upload failed: HTTP {resp.status_code}")

        url = resp.text.strip()
        if not url.startswith("http"):
            raise ExternalFetchError("Paste service did not return a valid URL.")

        self.logger.info(f"Snapshot uploaded to {url}")
        return url

    def raw_url(self, url: str) -> str:
        """dpaste serves raw content at `<paste url>.txt`."""
        target = url.strip()
        if "dpaste.com" in target and not target.endswith(".txt"):
            target = target.rstrip("/") + ".txt"
        return target

    async def download(self, url: str) -> dict[str, Any]:
        if not url.strip().startswith("http"):
            raise ExternalFetchError(f"Not a valid snapshot URL: {url!r}")

        target = self._via_proxy(self.raw_url(url))
        try:
            resp = await self._get_client().get(target)
        except httpx.HTTPError as e:
            self.logger.error(f"Snapshot download failed: {e}")
            raise ExternalFetchError(f"Download failed: {e}") from e

        if resp.is_error:
            raise ExternalFetchError(
                f"Could not fetch snapshot (HTTP {resp.status_code}). "
                "The link may have expired or never existed."
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise ExternalFetchError("Downloaded snapshot is not valid JSON.") from e

        if not isinstance(data, dict):
            raise ExternalFetchError("Downloaded snapshot is not a JSON object.")
        return data
