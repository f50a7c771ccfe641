import boto3
from botocore.config import Config
from ..core.config import Settings, settings as default_settings


def get_s3_client(settings: Settings = default_settings):
    session = boto3.session.Session(
        aws_access_key_id=settings.s3_access_key,
        aws_secret_access_key=settings.s3_secret_key,
        region_name=settings.s3_region,
    )
    cfg = Config(s3={'addressing_style': 'path' if settings.s3_force_path_style else 'virtual'})
    return session.client('s3', endpoint_url=settings.s3_endpoint, config=cfg)


def object_url(key: str, settings: Settings = default_settings) -> str:
    bucket = settings.s3_bucket
    if settings.s3_endpoint and settings.s3_force_path_style:
        return f"{settings.s3_endpoint.rstrip('/')}/{bucket}/{key}"
    # default virtual-hosted-style url
    host = f"https://{bucket}.s3.{settings.s3_region}.amazonaws.com" if settings.s3_region else f"https://{bucket}.s3.amazonaws.com"
    return f"{host}/{key}"


def upload_fileobj(fileobj, key: str, content_type: str = 'application/octet-stream', settings: Settings = default_settings, client=None) -> str:
    bucket = settings.s3_bucket
    if not bucket:
        raise RuntimeError("S3_BUCKET is not configured")
    client = client or get_s3_client(settings)
    client.upload_fileobj(fileobj, bucket, key, ExtraArgs={'ContentType': content_type})
    return object_url(key, settings)
