"""
Company seal image loading.

Fetches the optional seal (stamp) image shown beside the signature block,
either over HTTP or from an inline ``data:`` URL, and validates it with
Pillow before it is embedded in the document.
"""

import base64
import binascii
import hashlib
import logging
import re
from dataclasses import dataclass
from io import BytesIO
from typing import Optional

import httpx
from PIL import Image, UnidentifiedImageError

from ..exceptions import QuotationCoreError

logger = logging.getLogger(__name__)


DEFAULT_MAX_BYTES = 2 * 1024 * 1024
DEFAULT_USER_AGENT = "quotation-core/1.0"

_DATA_URL = re.compile(r"^data:(?P<mime>image/[\w.+-]+)?(?P<params>(;[\w-]+=[^;,]*)*)(?P<base64>;base64)?,(?P<payload>.*)$", re.DOTALL)


class SealLoadError(QuotationCoreError):
    """Raised when a seal image cannot be fetched or decoded."""
    pass


@dataclass
class SealImage:
    """A validated seal image ready for embedding."""

    data: bytes
    mime_type: str
    width: int
    height: int
    checksum: str
    source: str  # "http" or "data-url"

    @property
    def size(self) -> int:
        return len(self.data)


class SealLoader:
    """
    Async loader for company seal images.

    Usage:
        async with SealLoader(timeout=5.0) as loader:
            seal = await loader.load(company.branding.seal_image_url)

    A caller-supplied ``client`` is used as-is and never closed by the
    loader; otherwise the loader owns the client it creates.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        max_bytes: int = DEFAULT_MAX_BYTES,
        user_agent: str = DEFAULT_USER_AGENT,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the seal loader.

        Args:
            timeout: Request timeout in seconds; None waits indefinitely
            max_bytes: Largest accepted image payload
            user_agent: User-Agent header for HTTP fetches
            client: Optional shared httpx.AsyncClient
            transport: Optional transport for the owned client (tests use
                       httpx.MockTransport)
        """
        self.timeout = timeout
        self.max_bytes = max_bytes
        self.user_agent = user_agent
        self._transport = transport
        self._http_client = client
        self._owns_client = client is None

    @classmethod
    def from_config(cls, config, client: Optional[httpx.AsyncClient] = None,
                    transport: Optional[httpx.AsyncBaseTransport] = None) -> "SealLoader":
        """Create a loader from an EngineConfig."""
        return cls(
            timeout=config.seal_fetch_timeout,
            max_bytes=config.seal_max_bytes,
            user_agent=config.user_agent,
            client=client,
            transport=transport,
        )

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._http_client is None or self._http_client.is_closed:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                headers={"User-Agent": self.user_agent},
                transport=self._transport,
            )
            self._owns_client = True
        return self._http_client

    async def close(self) -> None:
        """Close the HTTP client if this loader created it."""
        if self._owns_client and self._http_client is not None and not self._http_client.is_closed:
            await self._http_client.aclose()
        if self._owns_client:
            self._http_client = None

    async def load(self, url: str) -> SealImage:
        """
        Load and validate a seal image.

        Args:
            url: http(s) URL or ``data:image/...;base64,`` URL

        Returns:
            SealImage with raw bytes and detected format

        Raises:
            SealLoadError: On invalid URLs, network errors, non-2xx responses,
                           oversized payloads or data that is not a readable image
        """
        if not url:
            raise SealLoadError("No seal image URL provided")
        if not isinstance(url, str):
            raise SealLoadError(f"Seal image URL must be a string, got {type(url).__name__}")

        if url.startswith("data:"):
            return self._validate_image(self._decode_data_url(url), source="data-url")

        client = await self._get_http_client()
        try:
            data = await self._fetch(client, url)
        except httpx.HTTPStatusError as e:
            logger.warning(f"Seal image request returned HTTP {e.response.status_code}: {url}")
            raise SealLoadError(f"HTTP {e.response.status_code} fetching seal image") from e
        except (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError) as e:
            logger.warning(f"Seal image request failed for {url}: {e}")
            raise SealLoadError(f"Failed to fetch seal image: {e}") from e

        logger.debug(f"Fetched seal image ({len(data)} bytes) from {url}")
        return self._validate_image(data, source="http")

    async def _fetch(self, client: httpx.AsyncClient, url: str) -> bytes:
        """Stream the response body, stopping as soon as it exceeds max_bytes."""
        async with client.stream("GET", url) as response:
            response.raise_for_status()

            declared = response.headers.get("Content-Length", "")
            if declared.isdigit() and int(declared) > self.max_bytes:
                raise SealLoadError(f"Seal image exceeds {self.max_bytes} bytes ({declared} bytes declared)")

            buffer = bytearray()
            async for chunk in response.aiter_bytes():
                buffer.extend(chunk)
                if len(buffer) > self.max_bytes:
                    raise SealLoadError(f"Seal image exceeds {self.max_bytes} bytes")
            return bytes(buffer)

    def _decode_data_url(self, url: str) -> bytes:
        match = _DATA_URL.match(url)
        if not match or not match.group("base64"):
            raise SealLoadError("Unsupported data URL for seal image")
        try:
            return base64.b64decode(match.group("payload"), validate=True)
        except (binascii.Error, ValueError) as e:
            raise SealLoadError(f"Invalid base64 seal image: {e}") from e

    def _validate_image(self, data: bytes, source: str) -> SealImage:
        if not data:
            raise SealLoadError("Seal image is empty")
        if len(data) > self.max_bytes:
            raise SealLoadError(f"Seal image exceeds {self.max_bytes} bytes ({len(data)} bytes)")

        try:
            with Image.open(BytesIO(data)) as img:
                image_format = img.format
                width, height = img.size
                img.verify()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as e:
            raise SealLoadError(f"Seal image could not be decoded: {e}") from e

        mime_type = Image.MIME.get(image_format or "", "application/octet-stream")
        return SealImage(
            data=data,
            mime_type=mime_type,
            width=width,
            height=height,
            checksum=hashlib.sha256(data).hexdigest(),
            source=source,
        )
