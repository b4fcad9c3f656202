from .department import Department, Category
from .user import User
from .complaint import Complaint
from .comment import Comment
from .attachment import Attachment

__all__ = [
    "Department", "Category", "User", "Complaint",
    "Comment", "Attachment",
]
