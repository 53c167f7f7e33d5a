from blockcms.extensions import db
from .base import BaseModel

# Columns a listing may be sorted by, prefix with "-" for descending order
SORTABLE_COLUMNS = ("name", "slug", "created_at", "updated_at")


class ContentType(BaseModel):
    """
    Describes one kind of content block (news release, html block, ...).

    The capability flags drive the lifecycle controller: whether blocks carry
    a version chain, can be connected to pages, live under a parent section,
    can be searched, or carry a category.
    """
    __tablename__ = "content_types"

    key = db.Column(db.String(100), unique=True, nullable=False, index=True)
    display_name = db.Column(db.String(200), nullable=False)
    path = db.Column(db.String(200), unique=True, nullable=False)

    supports_versioning = db.Column(db.Boolean, nullable=False, default=True)
    connectable = db.Column(db.Boolean, nullable=False, default=True)
    can_have_parent = db.Column(db.Boolean, nullable=False, default=False)
    searchable = db.Column(db.Boolean, nullable=False, default=True)
    supports_categories = db.Column(db.Boolean, nullable=False, default=False)

    default_order = db.Column(db.String(50), nullable=True)
    fields = db.Column(db.JSON, nullable=False, default=list)
    required_fields = db.Column(db.JSON, nullable=False, default=list)

    @classmethod
    def find_by_key(cls, key):
        return cls.query.filter_by(key=key).first()

    @classmethod
    def find_by_path(cls, path):
        return cls.query.filter_by(path=path).first()

    def calculate_path(self, slug):
        return f"/{self.path}/{slug}"

    def __repr__(self):
        return f"<ContentType {self.key}>"
