from .user import User
from .blog import BlogPost
from .blog_revision import BlogRevision
from .blog_view import BlogView

__all__ = [
    "User",
    "BlogPost",
    "BlogRevision",
    "BlogView",
]
