"""Client side media upload.

Two transfer strategies share one contract: take a ``MediaFile``, return the
stored asset's ``MediaAssetOut``, raise ``UploadError`` on any non-2xx answer.
``UploadService`` enforces the size limit before either strategy touches the
network; oversized files are rejected, never truncated.
"""
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
import aiohttp
from ..core.config import Settings
from ..core.errors import UploadError, UploadTooLargeError, ValidationError
from ..schemas.media import MediaAssetOut
from .http import ApiClient, error_message, is_success, parse_asset
from .session import SessionContext

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "video/mp4"


@dataclass(frozen=True)
class MediaFile:
    data: bytes
    mime_type: str
    file_name: str

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_path(cls, path: str | Path, mime_type: str | None = None) -> "MediaFile":
        path = Path(path)
        mime = mime_type or mimetypes.guess_type(path.name)[0] or DEFAULT_MIME_TYPE
        return cls(data=path.read_bytes(), mime_type=mime, file_name=path.name)


def _form(media: MediaFile, field: str) -> aiohttp.FormData:
    form = aiohttp.FormData()
    form.add_field(field, media.data, filename=media.file_name, content_type=media.mime_type)
    return form


def cloudinary_resource_type(mime_type: str) -> str:
    major = mime_type.split("/")[0]
    if major in ("video", "image"):
        return major
    return "auto"


class CloudinaryUploader:
    """Unsigned upload straight to Cloudinary, authorized by an upload preset."""

    def __init__(self, api: ApiClient, cloud_name: str | None, upload_preset: str | None,
                 api_base: str = "https://api.cloudinary.com/v1_1", timeout: float | None = None):
        if not cloud_name or not upload_preset:
            raise ValidationError("Cloudinary cloud name and upload preset must be configured")
        self.api = api
        self.cloud_name = cloud_name
        self.upload_preset = upload_preset
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout

    def endpoint(self, mime_type: str) -> str:
        return f"{self.api_base}/{self.cloud_name}/{cloudinary_resource_type(mime_type)}/upload"

    async def upload(self, media: MediaFile) -> MediaAssetOut:
        form = _form(media, "file")
        form.add_field("upload_preset", self.upload_preset)
        status, body = await self.api.request(
            "POST", self.endpoint(media.mime_type), data=form, timeout=self.timeout, transport_error=UploadError,
        )
        if not is_success(status):
            msg = error_message(body, "no response body")
            raise UploadError(f"Cloudinary upload failed ({status}): {msg}", status=status)
        if not isinstance(body, dict) or not body.get("secure_url"):
            raise UploadError("Cloudinary response did not include a secure_url", status=status)
        return parse_asset(body, UploadError, status)


class ServerUploader:
    """Multipart upload to our own /upload endpoint."""

    field_name = "media_0"

    def __init__(self, api: ApiClient, session: SessionContext | None = None, timeout: float | None = None):
        self.api = api
        self.session = session
        self.timeout = timeout

    async def upload(self, media: MediaFile) -> MediaAssetOut:
        headers = {}
        if self.session is not None and self.session.access_token:
            headers["Authorization"] = f"Bearer {self.session.access_token}"
        status, body = await self.api.request(
            "POST", "/upload", data=_form(media, self.field_name), headers=headers, timeout=self.timeout,
            transport_error=UploadError,
        )
        if not is_success(status):
            raise UploadError(f"Upload failed ({status}): {error_message(body, 'no response body')}", status=status)
        resources = body.get("resources") if isinstance(body, dict) else None
        if not isinstance(resources, list) or not resources:
            raise UploadError("Upload response did not include any resources", status=status)
        asset = parse_asset(resources[0], UploadError, status)
        if not asset.secure_url:
            raise UploadError("Upload response did not include a secure_url", status=status)
        return asset


class UploadService:
    def __init__(self, strategy, max_bytes: int):
        self.strategy = strategy
        self.max_bytes = max_bytes

    async def upload(self, media: MediaFile) -> MediaAssetOut:
        if media.size == 0:
            raise ValidationError("Cannot upload an empty file")
        if media.size > self.max_bytes:
            logger.warning("upload.rejected_too_large file=%s bytes=%s limit=%s", media.file_name, media.size, self.max_bytes)
            raise UploadTooLargeError(size=media.size, limit=self.max_bytes)
        asset = await self.strategy.upload(media)
        logger.info("upload.completed strategy=%s public_id=%s bytes=%s", type(self.strategy).__name__, asset.public_id, asset.bytes)
        return asset


def build_upload_service(cfg: Settings, api: ApiClient, session: SessionContext | None = None) -> UploadService:
    if cfg.upload_strategy == "cloudinary":
        strategy = CloudinaryUploader(
            api, cfg.cloudinary_cloud_name, cfg.cloudinary_upload_preset,
            api_base=cfg.cloudinary_api_base, timeout=cfg.upload_timeout_seconds,
        )
    elif cfg.upload_strategy == "server":
        strategy = ServerUploader(api, session=session, timeout=cfg.upload_timeout_seconds)
    else:
        raise ValueError(f"Unknown UPLOAD_STRATEGY: {cfg.upload_strategy}")
    return UploadService(strategy, cfg.max_upload_bytes)
