from blockcms.extensions import db
from .base import BaseModel

class ContentBlock(BaseModel):
    __tablename__ = "content_blocks"

    content_type_key = db.Column(
        db.String(100),
        db.ForeignKey("content_types.key"),
        nullable=False,
        index=True
    )
    name = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), nullable=True, index=True)
    category_id = db.Column(db.String(36), db.ForeignKey("categories.id"), nullable=True)
    section_id = db.Column(db.String(36), db.ForeignKey("sections.id"), nullable=True)
    content = db.Column(db.JSON, nullable=False, default=dict)  # type specific fields

    published = db.Column(db.Boolean, nullable=False, default=False, index=True)
    latest_version = db.Column(db.Integer, nullable=False, default=0)

    # Optimistic concurrency marker, bumped by SQLAlchemy on every flush
    lock_version = db.Column(db.Integer, nullable=False)

    created_by = db.Column(db.String(36), nullable=True)
    updated_by = db.Column(db.String(36), nullable=True)

    content_type = db.relationship("ContentType")
    category = db.relationship("Category")
    section = db.relationship("Section")

    versions = db.relationship(
        "BlockVersion",
        back_populates="block",
        order_by="BlockVersion.version",
        cascade="all, delete-orphan"
    )
    connectors = db.relationship(
        "PageConnector",
        back_populates="block",
        cascade="all, delete-orphan"
    )

    __table_args__ = (
        db.UniqueConstraint("content_type_key", "slug", name="uq_block_slug_per_type"),
        db.Index("idx_block_type_created", "content_type_key", "created_at"),
    )

    __mapper_args__ = {"version_id_col": lock_version}

    # Page the block was connected to while being created (not persisted)
    connected_page = None

    @property
    def errors(self):
        """Validation messages from the last rejected save, keyed by field."""
        try:
            return self._errors
        except AttributeError:
            self._errors = {}
            return self._errors

    @property
    def draft_version(self):
        if self.content_type is None or not self.content_type.supports_versioning:
            return None
        return (self.latest_version or 0) + 1

    @property
    def page_title(self):
        return self.name

    def __repr__(self):
        return f"<ContentBlock {self.content_type_key}:{self.id} {self.name!r}>"
