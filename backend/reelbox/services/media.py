import logging
import mimetypes
import uuid
from dataclasses import dataclass
from pathlib import PurePath
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from ..core.errors import InternalError, UploadTooLargeError, ValidationError
from ..lib.storage import StorageError
from ..models import MediaAsset, ResourceType

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp", "bmp", "ico", "heic"}
VIDEO_EXTENSIONS = {"mp4", "mov", "avi", "webm", "flv", "mkv", "m4v", "3gp"}


@dataclass
class IncomingFile:
    field: str
    filename: str
    content_type: str
    data: bytes


def file_format(filename: str, content_type: str) -> str:
    ext = PurePath(filename or "").suffix.lstrip(".").lower()
    if ext:
        return ext
    # "video/mp4" -> "mp4"
    subtype = (content_type or "").split("/")[-1]
    if subtype.isalnum():
        return subtype.lower()
    guessed = mimetypes.guess_extension(content_type or "")
    return guessed.lstrip(".") if guessed else "bin"


def classify(content_type: str, fmt: str) -> ResourceType:
    major = (content_type or "").split("/")[0]
    if major == "video" or (major != "image" and fmt in VIDEO_EXTENSIONS):
        return ResourceType.video
    if major == "image" or fmt in IMAGE_EXTENSIONS:
        return ResourceType.image
    return ResourceType.raw


class MediaService:
    def __init__(self, db: Session, storage, max_bytes: int):
        self.db = db
        self.storage = storage
        self.max_bytes = max_bytes

    def check_size(self, size: int) -> None:
        if size > self.max_bytes:
            raise UploadTooLargeError(size=size, limit=self.max_bytes)

    def store(self, files: list[IncomingFile], owner_id: int | None = None) -> list[MediaAsset]:
        if not files:
            raise ValidationError("No media files provided")
        # reject the whole request before anything is written
        for f in files:
            self.check_size(len(f.data))

        assets = []
        saved_keys = []
        for f in files:
            fmt = file_format(f.filename, f.content_type)
            public_id = f"uploads/{uuid.uuid4().hex}"
            key = f"{public_id}.{fmt}"
            try:
                url = self.storage.save(key, f.data, f.content_type or "application/octet-stream")
            except StorageError as e:
                logger.exception("media.save_failed key=%s", key)
                self.db.rollback()
                self._discard(saved_keys)
                raise InternalError("Failed to store media") from e
            saved_keys.append(key)
            asset = MediaAsset(
                public_id=public_id,
                secure_url=url,
                storage_key=key,
                resource_type=classify(f.content_type, fmt).value,
                format=fmt,
                bytes=len(f.data),
                owner_id=owner_id,
            )
            self.db.add(asset)
            assets.append(asset)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("media.store_failed count=%s", len(files))
            self._discard(saved_keys)
            raise InternalError() from e
        for asset in assets:
            self.db.refresh(asset)
        logger.info("media.stored count=%s owner_id=%s", len(assets), owner_id)
        return assets

    def _discard(self, keys: list[str]) -> None:
        for key in keys:
            try:
                self.storage.delete(key)
            except StorageError:
                # the original failure is what gets reported
                logger.warning("media.orphaned key=%s", key)

    def list(self, resource_type: str | None = None) -> list[MediaAsset]:
        q = self.db.query(MediaAsset)
        if resource_type:
            q = q.filter(MediaAsset.resource_type == resource_type)
        return q.order_by(MediaAsset.created_at.desc(), MediaAsset.id.desc()).all()
