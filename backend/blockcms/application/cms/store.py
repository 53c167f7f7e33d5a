# blockcms/application/cms/store.py
from typing import Any, Dict, List, Optional

from flask import current_app
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from blockcms.extensions import db
from blockcms.models.category import Category
from blockcms.models.content_block import ContentBlock
from blockcms.models.page import Page
from blockcms.models.page_connector import PageConnector
from blockcms.models.section import Section
from blockcms.domain.exceptions import ContentNotFound, EditConflict
from blockcms.domain.invariants.block import collect_block_errors
from blockcms.utils.audit import log_action
from blockcms.utils.optimistic_lock import enforce_optimistic_lock
from blockcms.utils.order import order_clause
from blockcms.utils.slug import slugify
from blockcms.utils.transaction import transactional

# Submitted keys that map onto block columns; everything else is content
BLOCK_ATTRIBUTES = ("name", "slug", "category_id", "section_id")
CONTROL_FIELDS = ("publish_on_save", "lock_version")


def assign_fields(block: ContentBlock, fields: Dict[str, Any]) -> None:
    content = dict(block.content or {})

    for key, value in (fields or {}).items():
        if key in CONTROL_FIELDS:
            continue
        if key in BLOCK_ATTRIBUTES:
            if key != "name" and value == "":
                value = None
            setattr(block, key, value)
        else:
            content[key] = value

    block.content = content


class ContentBlockStore:
    """
    Persistence of content blocks.

    `save`, `update` and `delete` report success as a boolean. Rejected
    saves leave their messages in `block.errors`.
    """

    # ------------------------
    # Lookups
    # ------------------------
    def find(self, content_type, block_id) -> ContentBlock:
        block = ContentBlock.query.filter_by(
            id=block_id,
            content_type_key=content_type.key
        ).first()

        if not block:
            raise ContentNotFound(f"No {content_type.display_name} with id {block_id}")
        return block

    def find_by_slug(self, content_type, slug) -> Optional[ContentBlock]:
        return ContentBlock.query.filter_by(
            content_type_key=content_type.key,
            slug=slug
        ).first()

    def last_created(self, content_type) -> Optional[ContentBlock]:
        return (
            ContentBlock.query
            .filter_by(content_type_key=content_type.key)
            .order_by(ContentBlock.created_at.desc())
            .first()
        )

    def find_section(self, section_id) -> Section:
        section = db.session.get(Section, section_id)
        if not section:
            raise ContentNotFound(f"No section with id {section_id}")
        return section

    def find_page(self, page_id) -> Page:
        page = db.session.get(Page, page_id)
        if not page:
            raise ContentNotFound(f"No page with id {page_id}")
        return page

    def default_parent(self, content_type) -> Optional[Section]:
        if not content_type.can_have_parent:
            return None
        return Section.with_path(content_type.path).first()

    def list(
        self,
        content_type,
        *,
        section_id: Optional[str] = None,
        search: Optional[str] = None,
        order: Optional[str] = None,
        page: int = 1,
        per_page: Optional[int] = None,
    ):
        query = ContentBlock.query.filter_by(content_type_key=content_type.key)

        if section_id and section_id != "all":
            section = self.find_section(section_id)
            query = query.filter(ContentBlock.section_id == section.id)

        if search and content_type.searchable:
            term = f"%{search}%"
            query = query.filter(
                or_(ContentBlock.name.ilike(term), ContentBlock.slug.ilike(term))
            )

        clause = order_clause(ContentBlock, order)
        if clause is None:
            clause = order_clause(ContentBlock, content_type.default_order)
        if clause is None:
            clause = ContentBlock.name.asc()

        per_page = per_page or current_app.config.get("CMS_PER_PAGE", 15)
        return query.order_by(clause, ContentBlock.id.asc()).paginate(
            page=page,
            per_page=per_page,
            error_out=False
        )

    def connected_pages(self, block) -> List[Page]:
        return (
            Page.query
            .join(PageConnector, PageConnector.page_id == Page.id)
            .filter(PageConnector.block_id == block.id)
            .order_by(Page.name.asc())
            .distinct()
            .all()
        )

    # ------------------------
    # Writes
    # ------------------------
    def build(self, content_type, fields: Optional[Dict[str, Any]] = None) -> ContentBlock:
        block = ContentBlock()
        block.content_type_key = content_type.key
        block.content_type = content_type
        block.content = {}
        block.published = False
        block.latest_version = 0
        assign_fields(block, fields or {})
        return block

    def save(self, block: ContentBlock, *, actor_id: Optional[str] = None) -> bool:
        is_new = block.id is None

        if not block.slug and block.name:
            block.slug = slugify(block.name) or None

        with db.session.no_autoflush:
            content_type = block.content_type
            errors = collect_block_errors(block, content_type)
            self._collect_reference_errors(block, errors)

        block.errors.clear()
        if errors:
            block.errors.update(errors)
            self._discard_changes(block)
            return False

        if is_new:
            block.created_by = actor_id
        block.updated_by = actor_id

        try:
            with transactional():
                db.session.add(block)
                db.session.flush()  # ensures block.id is available

                log_action(
                    action="block.create" if is_new else "block.update",
                    entity_type=content_type.key,
                    entity_id=block.id,
                    actor_id=actor_id,
                    payload={
                        "name": block.name,
                        "slug": block.slug,
                    },
                )
            return True

        except IntegrityError:
            # Typically raised by the (content_type_key, slug) constraint
            block.errors.setdefault("slug", []).append("has already been taken")
            return False

        except StaleDataError as exc:
            raise EditConflict(f"{block!r} was modified by someone else") from exc

    def update(
        self,
        block: ContentBlock,
        fields: Dict[str, Any],
        *,
        actor_id: Optional[str] = None,
        lock_version=None,
        if_unmodified_since: Optional[str] = None,
    ) -> bool:
        enforce_optimistic_lock(
            block,
            lock_version=lock_version,
            if_unmodified_since=if_unmodified_since,
        )

        # Versioned types: this edits the draft, publishing snapshots it
        assign_fields(block, fields)

        return self.save(block, actor_id=actor_id)

    def delete(self, block: ContentBlock, *, actor_id: Optional[str] = None) -> bool:
        block_id = block.id
        content_type_key = block.content_type_key
        try:
            with transactional():
                db.session.delete(block)

                log_action(
                    action="block.delete",
                    entity_type=content_type_key,
                    entity_id=block_id,
                    actor_id=actor_id,
                    payload={"name": block.name},
                )
            return True

        except SQLAlchemyError as exc:
            current_app.logger.warning("Could not delete %r: %s", block, exc)
            return False

    def connect(
        self,
        block: ContentBlock,
        page: Page,
        container: Optional[str] = None,
        *,
        actor_id: Optional[str] = None,
    ) -> PageConnector:
        with transactional():
            connector = PageConnector()
            connector.page_id = page.id
            connector.block_id = block.id
            connector.container = container or "main"

            db.session.add(connector)

            log_action(
                action="block.connect",
                entity_type=block.content_type_key,
                entity_id=block.id,
                actor_id=actor_id,
                payload={"page_id": page.id, "container": connector.container},
            )

        block.connected_page = page
        return connector

    # ------------------------
    # Helpers
    # ------------------------
    def _collect_reference_errors(self, block, errors):
        content_type = block.content_type

        if block.category_id:
            category = db.session.get(Category, block.category_id)
            if not category or category.content_type_key != content_type.key:
                errors.setdefault("category_id", []).append("does not exist")

        if block.section_id and not db.session.get(Section, block.section_id):
            errors.setdefault("section_id", []).append("does not exist")

        if block.slug:
            taken = ContentBlock.query.filter(
                ContentBlock.content_type_key == content_type.key,
                ContentBlock.slug == block.slug,
            )
            if block.id is not None:
                taken = taken.filter(ContentBlock.id != block.id)
            if db.session.query(taken.exists()).scalar():
                errors.setdefault("slug", []).append("has already been taken")

    def _discard_changes(self, block):
        # Keep the submitted values on the object for re-rendering the form
        # without letting a later autoflush write them.
        if block in db.session:
            db.session.expunge(block)
