import logging
from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.orm import Session
from fastapi.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile
from ..db.session import get_db
from ..core.config import settings
from ..lib.storage import get_storage
from ..schemas.media import MediaAssetOut, MediaListResponse, UploadResponse
from ..services.media import IncomingFile, MediaService
from .auth import get_optional_user

router = APIRouter()
logger = logging.getLogger(__name__)

MEDIA_FIELD_PREFIX = "media_"


async def read_limited(upload: UploadFile, limit: int) -> bytes:
    # one byte past the limit is enough to know it is oversized
    return await upload.read(limit + 1)


@router.post("/upload", response_model=UploadResponse)
async def upload_media(
    request: Request,
    db: Session = Depends(get_db),
    storage=Depends(get_storage),
    authorization: str | None = Header(default=None),
):
    owner = await run_in_threadpool(get_optional_user, authorization, db)
    service = MediaService(db, storage, settings.max_upload_bytes)

    form = await request.form()
    files = []
    try:
        for field, value in form.multi_items():
            if not field.startswith(MEDIA_FIELD_PREFIX) or not isinstance(value, UploadFile):
                continue
            data = await read_limited(value, settings.max_upload_bytes)
            service.check_size(len(data))
            files.append(IncomingFile(field=field, filename=value.filename or field, content_type=value.content_type or "", data=data))
    finally:
        await form.close()

    logger.info("media.upload_received files=%s owner_id=%s", len(files), owner.id if owner else None)
    assets = await run_in_threadpool(service.store, files, owner_id=owner.id if owner else None)
    noun = "file" if len(assets) == 1 else "files"
    return UploadResponse(
        message=f"Uploaded {len(assets)} {noun} successfully",
        resources=[MediaAssetOut.model_validate(a) for a in assets],
    )


@router.get("/api/media", response_model=MediaListResponse)
def list_media(resource_type: str | None = None, db: Session = Depends(get_db)):
    assets = MediaService(db, storage=None, max_bytes=settings.max_upload_bytes).list(resource_type)
    return MediaListResponse(resources=[MediaAssetOut.model_validate(a) for a in assets])
