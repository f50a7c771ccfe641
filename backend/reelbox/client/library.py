from collections.abc import Iterable
from ..core.errors import FetchError
from ..schemas.media import MediaAssetOut
from .http import ApiClient, error_message, is_success, parse_asset


class MediaLibrary:
    def __init__(self, api: ApiClient):
        self.api = api

    async def list(self) -> list[MediaAssetOut]:
        """One full, unfiltered listing per call. No retry on failure."""
        status, body = await self.api.request("GET", "/api/media")
        if not is_success(status):
            raise FetchError(f"Failed to fetch media: {error_message(body, str(status))}", status=status)
        if not isinstance(body, dict) or not isinstance(body.get("resources", []), list):
            raise FetchError("Media listing response was not a resource list", status=status)
        return [parse_asset(r, FetchError, status) for r in body.get("resources") or []]


def filter_by_type(assets: Iterable[MediaAssetOut], resource_type: str = "video") -> list[MediaAssetOut]:
    return [a for a in assets if a.resource_type == resource_type]


def format_file_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def format_duration(seconds: float | None) -> str:
    if not seconds:
        return ""
    mins = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{mins}:{secs:02d}"
