# Schemas package
from .shared import UserResponse
from .auth import SyncRequest
from .posts import PostCreate, CommentCreate, CommentResponse, PostResponse, PostWithAuthor, ToggleLikeResponse
from .chat import ChatMessageCreate, ChatMessageResponse, DirectMessageCreate, DirectMessageResponse
from .admin import SetPasswordRequest, UnlockRequest, PasswordStatus, RoleGrant, WebhookConfig, WebhookUpdate
from .files import FileUpload, FileResponse
