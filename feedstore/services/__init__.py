"""Convenience exports for service layer."""
from .auth_service import (
    RegistrationError,
    SessionContext,
    authenticate_user,
    current_session,
    logout_user,
    register_user,
)
from .friendship_service import (
    accept_friend_request,
    are_friends,
    get_friend_requests,
    list_friend_requests,
    list_friends,
    reject_friend_request,
    send_friend_request,
)
from .maintenance_service import clear_all_data, collection_counts, reset_database
from .message_service import (
    get_conversation,
    get_messages,
    get_unread_count,
    list_conversations,
    mark_messages_as_read,
    send_message,
)
from .notification_service import (
    NotificationType,
    add_notification,
    get_notifications,
    get_unread_notification_count,
    list_notifications,
    mark_all_notifications_as_read,
    mark_notification_as_read,
)
from .post_service import (
    add_comment,
    create_post,
    delete_comment,
    delete_post,
    get_comments,
    get_likes,
    get_post,
    get_post_comments,
    get_post_engagement,
    get_post_likes,
    get_posts,
    is_post_liked,
    list_feed,
    list_user_posts,
    toggle_like,
)
from .user_service import (
    get_current_user,
    get_user_by_username,
    get_users,
    save_user,
    search_users,
    update_current_user,
)

__all__ = [
    "RegistrationError",
    "SessionContext",
    "authenticate_user",
    "current_session",
    "logout_user",
    "register_user",
    "accept_friend_request",
    "are_friends",
    "get_friend_requests",
    "list_friend_requests",
    "list_friends",
    "reject_friend_request",
    "send_friend_request",
    "clear_all_data",
    "collection_counts",
    "reset_database",
    "get_conversation",
    "get_messages",
    "get_unread_count",
    "list_conversations",
    "mark_messages_as_read",
    "send_message",
    "NotificationType",
    "add_notification",
    "get_notifications",
    "get_unread_notification_count",
    "list_notifications",
    "mark_all_notifications_as_read",
    "mark_notification_as_read",
    "add_comment",
    "create_post",
    "delete_comment",
    "delete_post",
    "get_comments",
    "get_likes",
    "get_post",
    "get_post_comments",
    "get_post_engagement",
    "get_post_likes",
    "get_posts",
    "is_post_liked",
    "list_feed",
    "list_user_posts",
    "toggle_like",
    "get_current_user",
    "get_user_by_username",
    "get_users",
    "save_user",
    "search_users",
    "update_current_user",
]
