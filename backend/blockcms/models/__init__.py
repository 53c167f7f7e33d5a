from .base import BaseModel
from .content_type import ContentType
from .category import Category
from .section import Section
from .page import Page
from .content_block import ContentBlock
from .block_version import BlockVersion
from .page_connector import PageConnector
from .user import User, Guest
from .audit_log import AuditLog

__all__ = [
    "BaseModel",
    "ContentType",
    "Category",
    "Section",
    "Page",
    "ContentBlock",
    "BlockVersion",
    "PageConnector",
    "User",
    "Guest",
    "AuditLog",
]
