from pydantic_settings import BaseSettings
from pydantic import Field

class Settings(BaseSettings):
    app_name: str = Field(default="reelbox")
    app_env: str = Field(default="development")
    app_debug: bool = Field(default=True)
    log_level: str = Field(default="INFO")

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)

    jwt_secret: str = Field(default="change_me_in_prod")
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=60 * 24)
    bcrypt_rounds: int = Field(default=10)

    database_url: str = Field(default="sqlite:///./database.sqlite")

    # Server side media storage: "local" or "s3"
    storage_backend: str = Field(default="local")
    media_dir: str = Field(default="./media")
    public_base_url: str = Field(default="http://localhost:3000")
    max_upload_bytes: int = Field(default=50 * 1024 * 1024)

    # S3 storage
    s3_endpoint: str | None = Field(default=None, alias="S3_ENDPOINT")
    s3_region: str | None = Field(default=None, alias="S3_REGION")
    s3_bucket: str | None = Field(default=None, alias="S3_BUCKET")
    s3_access_key: str | None = Field(default=None, alias="S3_ACCESS_KEY")
    s3_secret_key: str | None = Field(default=None, alias="S3_SECRET_KEY")
    s3_force_path_style: bool = Field(default=True, alias="S3_FORCE_PATH_STYLE")

    # Client config: "server" posts to our /upload, "cloudinary" goes direct (unsigned)
    api_base_url: str = Field(default="http://localhost:3000")
    upload_strategy: str = Field(default="server")
    cloudinary_cloud_name: str | None = Field(default=None)
    cloudinary_upload_preset: str | None = Field(default=None)
    cloudinary_api_base: str = Field(default="https://api.cloudinary.com/v1_1")
    request_timeout_seconds: float = Field(default=30.0)
    upload_timeout_seconds: float = Field(default=300.0)

    class Config:
        env_file = ".env"
        case_sensitive = False
        populate_by_name = True
        extra = "ignore"

settings = Settings()
