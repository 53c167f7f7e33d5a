from blockcms.extensions import db
from .base import BaseModel

class Category(BaseModel):
    __tablename__ = "categories"

    name = db.Column(db.String(200), nullable=False)
    content_type_key = db.Column(
        db.String(100),
        db.ForeignKey("content_types.key"),
        nullable=False,
        index=True
    )

    __table_args__ = (
        db.UniqueConstraint("content_type_key", "name", name="uq_category_name_per_type"),
    )
