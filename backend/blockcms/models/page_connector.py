from blockcms.extensions import db
from .base import BaseModel

class PageConnector(BaseModel):
    __tablename__ = "page_connectors"

    page_id = db.Column(db.String(36), db.ForeignKey("pages.id"), nullable=False, index=True)
    block_id = db.Column(
        db.String(36),
        db.ForeignKey("content_blocks.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    container = db.Column(db.String(100), nullable=False, default="main")

    page = db.relationship("Page", back_populates="connectors")
    block = db.relationship("ContentBlock", back_populates="connectors")

    __table_args__ = (
        db.UniqueConstraint("page_id", "block_id", "container", name="uq_page_block_container"),
    )
