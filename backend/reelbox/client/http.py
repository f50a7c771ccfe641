import json
import logging
from typing import Any
import aiohttp
import pydantic
from ..core.config import Settings, settings as default_settings
from ..core.errors import FetchError, RemoteError, RequestTimeoutError
from ..schemas.media import MediaAssetOut

logger = logging.getLogger(__name__)


class ApiClient:
    """Owns the aiohttp session used by every client call.

    Each request is a single attempt bounded by a timeout. Transport faults
    surface as ``transport_error`` (FetchError unless the caller says
    otherwise) and timeouts as RequestTimeoutError.
    """

    def __init__(self, base_url: str | None = None, timeout: float | None = None, session: aiohttp.ClientSession | None = None):
        self.base_url = (base_url or default_settings.api_base_url).rstrip("/")
        self.timeout = timeout or default_settings.request_timeout_seconds
        self._session = session
        self._owns_session = session is None

    @classmethod
    def from_settings(cls, cfg: Settings) -> "ApiClient":
        return cls(base_url=cfg.api_base_url, timeout=cfg.request_timeout_seconds)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.close()

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()

    def url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    async def request(
        self,
        method: str,
        path: str,
        *,
        timeout: float | None = None,
        transport_error: type[RemoteError] = FetchError,
        **kwargs,
    ) -> tuple[int, Any]:
        url = self.url(path)
        limit = timeout or self.timeout
        try:
            async with self.session.request(method, url, timeout=aiohttp.ClientTimeout(total=limit), **kwargs) as resp:
                raw = await resp.text()
                status = resp.status
        except TimeoutError as e:
            logger.warning("client.timeout method=%s url=%s timeout=%s", method, url, limit)
            raise RequestTimeoutError(f"{method} {url} timed out after {limit:g}s") from e
        except aiohttp.ClientError as e:
            logger.warning("client.transport_error method=%s url=%s error=%s", method, url, e)
            raise transport_error(f"{method} {url} failed: {e}") from e
        logger.debug("client.response method=%s url=%s status=%s", method, url, status)
        return status, parse_body(raw)


def parse_body(raw: str) -> Any:
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def error_message(body: Any, fallback: str) -> str:
    if isinstance(body, dict):
        msg = body.get("message")
        if isinstance(body.get("error"), dict):
            msg = msg or body["error"].get("message")
        if msg:
            return str(msg)
    if isinstance(body, str) and body.strip():
        return body.strip()
    return fallback


def is_success(status: int) -> bool:
    return 200 <= status < 300


def parse_asset(item: Any, error_cls: type[RemoteError], status: int) -> MediaAssetOut:
    if not isinstance(item, dict):
        raise error_cls(f"Malformed media entry in response: {item!r}", status=status)
    try:
        return MediaAssetOut.model_validate(item)
    except pydantic.ValidationError as e:
        raise error_cls(f"Malformed media entry in response: {e.error_count()} invalid field(s)", status=status) from e
