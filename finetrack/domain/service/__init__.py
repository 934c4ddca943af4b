"""Domain services."""

from .auth_service import AuthSession, StaticAuthSession
from .base import Service
from .comment_service import CommentService
from .jwt_service import JWTService
from .threading import assemble_threads, sort_replies, sort_threads

__all__ = [
    "AuthSession",
    "CommentService",
    "JWTService",
    "Service",
    "StaticAuthSession",
    "assemble_threads",
    "sort_replies",
    "sort_threads",
]
