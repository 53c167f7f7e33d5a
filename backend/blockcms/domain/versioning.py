# blockcms/domain/versioning.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from blockcms.extensions import db
from blockcms.models.block_version import BlockVersion
from blockcms.utils.audit import log_action
from blockcms.utils.transaction import transactional
from blockcms.utils.versioning import snapshot_block, restore_snapshot, next_version
from .exceptions import CmsError, ContentNotFound
from .invariants.block import assert_block


@dataclass(frozen=True)
class BlockView:
    """Read-only view of a block as it was at one version."""
    id: str
    content_type_key: str
    name: str
    slug: Optional[str]
    category_id: Optional[str]
    section_id: Optional[str]
    content: Dict[str, Any] = field(default_factory=dict)
    version: Optional[int] = None
    status: str = "published"
    published: bool = True
    reverted_from: Optional[int] = None
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None

    @classmethod
    def from_version(cls, block, record: BlockVersion) -> "BlockView":
        snapshot = record.snapshot or {}
        return cls(
            id=block.id,
            content_type_key=block.content_type_key,
            name=snapshot.get("name"),
            slug=snapshot.get("slug"),
            category_id=snapshot.get("category_id"),
            section_id=snapshot.get("section_id"),
            content=dict(snapshot.get("content") or {}),
            version=record.version,
            status=record.status,
            reverted_from=record.reverted_from,
            created_at=record.created_at,
            created_by=record.created_by,
        )

    @property
    def page_title(self):
        return self.name


@dataclass
class RevertResult:
    ok: bool
    view: Any = None
    error: Optional[Exception] = None

    def __bool__(self):
        return self.ok


class VersioningPolicy:
    """
    Draft/publish/revert lifecycle of content blocks.

    For versioned content types the block row is the draft: the mutable
    working copy at version ``latest_version + 1``. Publishing and reverting
    append immutable BlockVersion snapshots numbered 1..N; history is never
    rewritten. Unversioned types have no version records and every
    operation acts on the block itself.
    """

    def is_versioned(self, content_type) -> bool:
        return bool(content_type.supports_versioning)

    def load_draft(self, block):
        return block

    def load_as_of(self, block, version):
        if not self.is_versioned(block.content_type):
            return block
        return BlockView.from_version(block, self._find_version(block, version))

    def load_published(self, block):
        """Current published version, None when a versioned block was never published."""
        if not self.is_versioned(block.content_type):
            return block

        record = (
            BlockVersion.query
            .filter_by(block_id=block.id)
            .order_by(BlockVersion.version.desc())
            .first()
        )
        return BlockView.from_version(block, record) if record else None

    def versions(self, block) -> List[BlockVersion]:
        return (
            BlockVersion.query
            .filter_by(block_id=block.id)
            .order_by(BlockVersion.version.desc())
            .all()
        )

    def publish(self, block, *, actor_id: Optional[str] = None) -> bool:
        content_type = block.content_type
        try:
            with transactional():
                assert_block(block, content_type)

                payload = {}
                if self.is_versioned(content_type):
                    record = self._append_version(block, status="published", actor_id=actor_id)
                    payload["version"] = record.version

                block.published = True
                block.updated_by = actor_id

                log_action(
                    action="block.publish",
                    entity_type=content_type.key,
                    entity_id=block.id,
                    actor_id=actor_id,
                    payload=payload,
                )
            return True

        except (CmsError, SQLAlchemyError) as exc:
            current_app.logger.warning("Could not publish %r: %s", block, exc)
            return False

    def revert(self, block, version, *, actor_id: Optional[str] = None) -> RevertResult:
        content_type = block.content_type
        if not self.is_versioned(content_type):
            return RevertResult(ok=True, view=block)

        try:
            target = self._find_version(block, version)

            with transactional():
                restore_snapshot(block, target.snapshot)
                assert_block(block, content_type)

                record = self._append_version(
                    block,
                    status="reverted",
                    actor_id=actor_id,
                    reverted_from=target.version,
                )
                block.published = True
                block.updated_by = actor_id

                log_action(
                    action="block.revert",
                    entity_type=content_type.key,
                    entity_id=block.id,
                    actor_id=actor_id,
                    payload={
                        "from_version": target.version,
                        "to_version": record.version,
                    },
                )

            return RevertResult(ok=True, view=BlockView.from_version(block, record))

        except Exception as exc:
            current_app.logger.warning("Could not revert %r to version %s", block, version)
            current_app.logger.warning("%s", exc, exc_info=True)
            return RevertResult(ok=False, error=exc)

    def _find_version(self, block, version) -> BlockVersion:
        try:
            number = int(version)
        except (TypeError, ValueError):
            number = None

        record = None
        if number is not None:
            record = BlockVersion.query.filter_by(block_id=block.id, version=number).first()

        if record is None:
            raise ContentNotFound(f"{block!r} has no version {version}")
        return record

    def _append_version(self, block, *, status, actor_id=None, reverted_from=None) -> BlockVersion:
        record = BlockVersion()
        record.block_id = block.id
        record.version = next_version(block.id)
        record.status = status
        record.snapshot = snapshot_block(block)
        record.reverted_from = reverted_from
        record.created_by = actor_id

        db.session.add(record)
        block.latest_version = record.version
        return record
