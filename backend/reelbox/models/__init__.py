from .user import User
from .media import MediaAsset, ResourceType
