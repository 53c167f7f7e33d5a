from blockcms.extensions import db
from .base import BaseModel

class BlockVersion(BaseModel):
    __tablename__ = "block_versions"

    block_id = db.Column(
        db.String(36),
        db.ForeignKey("content_blocks.id", ondelete="CASCADE"),
        nullable=False
    )

    version = db.Column(db.Integer, nullable=False)
    status = db.Column(db.String(20), nullable=False)
    # published | reverted

    snapshot = db.Column(db.JSON, nullable=False)
    reverted_from = db.Column(db.Integer, nullable=True)

    created_by = db.Column(db.String(36), nullable=True)

    block = db.relationship("ContentBlock", back_populates="versions")

    __table_args__ = (
        db.UniqueConstraint("block_id", "version", name="uq_block_version"),
        db.Index("idx_block_version_block", "block_id"),
    )
