"""Users repository: profile upserts, user search and thread relationships."""

from .errors import (
    UserActivityError,
    UserContentError,
    UserListError,
    UserReadError,
    UserRepositoryError,
    UserWriteError,
)
from .models import (
    ActivityItem,
    AuthoredThread,
    AuthorSummary,
    SortOrder,
    ThreadReply,
    User,
    UserPage,
    UserProfileUpdate,
    UserThreads,
)
from .revalidation import (
    PROFILE_EDIT_PATH,
    clear_revalidation_hooks,
    register_revalidation_hook,
    revalidate_path,
)
from .threads import get_activity, get_authored_content
from .users import get_user, list_users, upsert_user

__all__ = [
    "ActivityItem",
    "AuthoredThread",
    "AuthorSummary",
    "SortOrder",
    "ThreadReply",
    "User",
    "UserPage",
    "UserProfileUpdate",
    "UserThreads",
    "UserRepositoryError",
    "UserWriteError",
    "UserReadError",
    "UserListError",
    "UserContentError",
    "UserActivityError",
    "PROFILE_EDIT_PATH",
    "register_revalidation_hook",
    "clear_revalidation_hooks",
    "revalidate_path",
    "upsert_user",
    "get_user",
    "list_users",
    "get_authored_content",
    "get_activity",
]
