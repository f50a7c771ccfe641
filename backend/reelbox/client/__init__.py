from .session import SessionContext, SessionUser
from .http import ApiClient
from .auth import AuthClient
from .upload import CloudinaryUploader, MediaFile, ServerUploader, UploadService, build_upload_service
from .library import MediaLibrary, filter_by_type
