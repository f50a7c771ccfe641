from datetime import datetime
from pydantic import BaseModel, ConfigDict

class MediaAssetOut(BaseModel):
    public_id: str
    secure_url: str
    resource_type: str
    format: str | None = None
    bytes: int
    width: int | None = None
    height: int | None = None
    duration: float | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True, extra="ignore")

class MediaListResponse(BaseModel):
    resources: list[MediaAssetOut]

class UploadResponse(BaseModel):
    success: bool = True
    message: str
    resources: list[MediaAssetOut]
