import io
import logging
from pathlib import Path
from boto3.exceptions import Boto3Error
from botocore.exceptions import BotoCoreError, ClientError
from ..core.config import Settings, settings
from . import s3

logger = logging.getLogger(__name__)

MEDIA_URL_PREFIX = "/media"


class StorageError(Exception):
    """A backend could not write or remove an object."""


class LocalStorage:
    """Writes objects under a directory that the app serves at /media."""

    def __init__(self, root: str | Path, base_url: str):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def save(self, key: str, data: bytes, content_type: str) -> str:
        path = self.root / key
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise StorageError(f"could not write {key}: {e}") from e
        logger.info("storage.local_saved key=%s bytes=%s", key, len(data))
        return f"{self.base_url}{MEDIA_URL_PREFIX}/{key}"

    def delete(self, key: str) -> None:
        try:
            (self.root / key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"could not remove {key}: {e}") from e


class S3Storage:
    def __init__(self, cfg: Settings, client=None):
        self.cfg = cfg
        self.client = client

    def _client(self):
        if self.client is None:
            self.client = s3.get_s3_client(self.cfg)
        return self.client

    def save(self, key: str, data: bytes, content_type: str) -> str:
        try:
            url = s3.upload_fileobj(io.BytesIO(data), key, content_type=content_type, settings=self.cfg, client=self._client())
        except (Boto3Error, BotoCoreError, ClientError) as e:
            raise StorageError(f"could not upload {key}: {e}") from e
        logger.info("storage.s3_uploaded key=%s bytes=%s", key, len(data))
        return url

    def delete(self, key: str) -> None:
        try:
            self._client().delete_object(Bucket=self.cfg.s3_bucket, Key=key)
        except (Boto3Error, BotoCoreError, ClientError) as e:
            raise StorageError(f"could not remove {key}: {e}") from e


def build_storage(cfg: Settings):
    if cfg.storage_backend == "s3":
        if not (cfg.s3_bucket and cfg.s3_access_key and cfg.s3_secret_key):
            raise RuntimeError("STORAGE_BACKEND=s3 requires S3_BUCKET, S3_ACCESS_KEY and S3_SECRET_KEY")
        return S3Storage(cfg)
    if cfg.storage_backend != "local":
        raise RuntimeError(f"Unknown STORAGE_BACKEND: {cfg.storage_backend}")
    return LocalStorage(cfg.media_dir, cfg.public_base_url)


def get_storage():
    return build_storage(settings)
