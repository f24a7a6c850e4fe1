"""Business logic for posts, comments and likes."""
from __future__ import annotations

import logging
from typing import Sequence

from ..config import CascadePolicy
from ..constants import COMMENTS, LIKES, NOTIFICATIONS, POSTS
from ..schemas import Comment, Like, Post, PostEngagement, parse_records
from ..storage import DocumentStore
from .notification_service import NotificationType, build_notification

logger = logging.getLogger(__name__)


def create_post(
    store: DocumentStore,
    *,
    username: str,
    images: Sequence[str] = (),
    caption: str = "",
) -> Post:
    """Create and persist a new post for the given user."""

    cleaned_caption = caption.strip()
    if not images and not cleaned_caption:
        raise ValueError("A post needs at least one image or a caption")

    timestamp = store.now()
    post = Post(
        id=store.new_id(timestamp),
        username=username,
        images=list(images),
        caption=cleaned_caption,
        timestamp=timestamp,
    )
    with store.transaction(POSTS) as batch:
        batch[POSTS].append(post.to_document())
    return post


def get_posts(store: DocumentStore) -> list[Post]:
    return parse_records(Post, store.get_collection(POSTS))


def get_post(store: DocumentStore, post_id: str) -> Post | None:
    for post in get_posts(store):
        if post.id == post_id:
            return post
    return None


def list_feed(store: DocumentStore) -> list[Post]:
    """Return every post, newest first."""

    return sorted(get_posts(store), key=lambda post: post.timestamp, reverse=True)


def list_user_posts(store: DocumentStore, username: str) -> list[Post]:
    return [post for post in list_feed(store) if post.username == username]


def delete_post(store: DocumentStore, *, post_id: str, actor: str) -> bool:
    """Delete a post owned by ``actor``.

    Comments, likes and notifications that reference the post are kept unless
    ``POST_DELETE_CASCADE`` says otherwise.
    """

    policy = store.settings.post_delete_cascade
    collections = [POSTS]
    if policy in (CascadePolicy.DEPENDENTS, CascadePolicy.ALL):
        collections += [COMMENTS, LIKES]
    if policy is CascadePolicy.ALL:
        collections.append(NOTIFICATIONS)

    with store.transaction(*collections) as batch:
        target = next((doc for doc in batch[POSTS] if doc.get("id") == post_id), None)
        if target is None:
            logger.info("Post %s not found", post_id)
            return False
        if target.get("username") != actor:
            logger.info("User %s may not delete post %s", actor, post_id)
            return False

        batch[POSTS] = [doc for doc in batch[POSTS] if doc.get("id") != post_id]
        if policy is not CascadePolicy.NONE:
            batch[COMMENTS] = [doc for doc in batch[COMMENTS] if doc.get("postId") != post_id]
            batch[LIKES] = [doc for doc in batch[LIKES] if doc.get("postId") != post_id]
        if policy is CascadePolicy.ALL:
            batch[NOTIFICATIONS] = [doc for doc in batch[NOTIFICATIONS] if doc.get("postId") != post_id]
    return True


def add_comment(store: DocumentStore, *, post_id: str, username: str, text: str) -> Comment:
    """Append a comment and notify the post owner when it is someone else."""

    if not text.strip():
        raise ValueError("Comment text must not be blank")

    post = get_post(store, post_id)
    timestamp = store.now()
    comment = Comment(
        id=store.new_id(timestamp),
        post_id=post_id,
        username=username,
        text=text,
        timestamp=timestamp,
    )
    with store.transaction(COMMENTS, NOTIFICATIONS) as batch:
        batch[COMMENTS].append(comment.to_document())
        if post is not None and post.username != username:
            notification = build_notification(
                store,
                type_=NotificationType.COMMENT,
                sender=username,
                recipient=post.username,
                post=post,
            )
            batch[NOTIFICATIONS].insert(0, notification.to_document())
    return comment


def get_comments(store: DocumentStore) -> list[Comment]:
    return parse_records(Comment, store.get_collection(COMMENTS))


def get_post_comments(store: DocumentStore, post_id: str) -> list[Comment]:
    """Return a post's comments, newest first."""

    comments = [comment for comment in get_comments(store) if comment.post_id == post_id]
    comments.sort(key=lambda comment: comment.timestamp, reverse=True)
    return comments


def delete_comment(store: DocumentStore, comment_id: str, *, actor: str | None = None) -> bool:
    """Remove a comment; with ``actor`` set, only that author's comment goes."""

    with store.transaction(COMMENTS) as batch:
        before = len(batch[COMMENTS])
        batch[COMMENTS] = [
            doc
            for doc in batch[COMMENTS]
            if not (doc.get("id") == comment_id and (actor is None or doc.get("username") == actor))
        ]
        removed = len(batch[COMMENTS]) != before
    if not removed:
        logger.info("Comment %s not removed", comment_id)
    return removed


def toggle_like(store: DocumentStore, *, post_id: str, username: str) -> bool:
    """Like or unlike a post; returns ``True`` when the post is now liked."""

    post = get_post(store, post_id)
    with store.transaction(LIKES, NOTIFICATIONS) as batch:
        likes = batch[LIKES]
        if any(doc.get("postId") == post_id and doc.get("username") == username for doc in likes):
            batch[LIKES] = [
                doc for doc in likes if not (doc.get("postId") == post_id and doc.get("username") == username)
            ]
            return False

        timestamp = store.now()
        like = Like(id=store.new_id(timestamp), post_id=post_id, username=username, timestamp=timestamp)
        likes.append(like.to_document())
        if post is not None and post.username != username:
            notification = build_notification(
                store,
                type_=NotificationType.LIKE,
                sender=username,
                recipient=post.username,
                post=post,
            )
            batch[NOTIFICATIONS].insert(0, notification.to_document())
    return True


def get_likes(store: DocumentStore) -> list[Like]:
    return parse_records(Like, store.get_collection(LIKES))


def get_post_likes(store: DocumentStore, post_id: str) -> list[Like]:
    return [like for like in get_likes(store) if like.post_id == post_id]


def is_post_liked(store: DocumentStore, *, post_id: str, username: str) -> bool:
    return any(like.username == username for like in get_post_likes(store, post_id))


def get_post_engagement(store: DocumentStore, post_id: str, *, viewer: str | None = None) -> PostEngagement:
    likes = get_post_likes(store, post_id)
    comments = [comment for comment in get_comments(store) if comment.post_id == post_id]
    return PostEngagement(
        post_id=post_id,
        likes=len(likes),
        comments=len(comments),
        liked_by_viewer=viewer is not None and any(like.username == viewer for like in likes),
    )


__all__ = [
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
]
