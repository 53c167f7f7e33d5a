# blockcms/application/cms/block_controller.py
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from flask import current_app

from blockcms.extensions import db
from blockcms.models.content_type import ContentType
from blockcms.domain.exceptions import AccessDenied, ContentNotFound, EditConflict
from blockcms.domain.permissions import Action, PermissionPolicy
from blockcms.domain.versioning import VersioningPolicy
from .store import ContentBlockStore

API_PREFIX = "/api/v1"

TRUE_VALUES = {True, "true", "1", 1, "on", "yes"}


@dataclass
class ActionResult:
    """
    What an action asks the view layer to do.

    kind:
    - render: show `view` with `data` (form re-renders carry a 4xx status)
    - redirect: go to `location`, showing the `flash` message
    - text: plain `body` with `status`
    """
    kind: str
    view: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)
    location: Optional[str] = None
    flash: Dict[str, str] = field(default_factory=dict)
    status: int = 200
    body: Optional[str] = None
    layout: Optional[str] = None
    toolbar_tab: Optional[str] = None


def redirect_to_first(*locations):
    return next((location for location in locations if location), None)


class BlockLifecycleController:
    """
    Content library actions for one content type.

    Every action takes the acting user (and any request parameters)
    explicitly and returns an ActionResult. AccessDenied always propagates;
    the boundary turns it into a 403.
    """

    toolbar_tab = "content_library"
    template_directory = "cms/blocks"

    def __init__(
        self,
        content_type: ContentType,
        *,
        store: Optional[ContentBlockStore] = None,
        versioning: Optional[VersioningPolicy] = None,
        permissions: Optional[PermissionPolicy] = None,
    ):
        self.content_type = content_type
        self.store = store or ContentBlockStore()
        self.versioning = versioning or VersioningPolicy()
        self.permissions = permissions or PermissionPolicy()

    @classmethod
    def for_type(cls, key: str, **kwargs) -> "BlockLifecycleController":
        content_type = ContentType.find_by_key(key)
        if not content_type:
            raise ContentNotFound(f"Unknown content type '{key}'")
        return cls(content_type, **kwargs)

    @property
    def display_name(self):
        return self.content_type.display_name

    @property
    def versioned(self):
        return self.versioning.is_versioned(self.content_type)

    # ------------------------
    # Paths
    # ------------------------
    def blocks_path(self):
        return f"{API_PREFIX}/content/{self.content_type.key}"

    def block_path(self, block, action=None):
        path = f"{self.blocks_path()}/{block.id}"
        return f"{path}/{action}" if action else path

    # ------------------------
    # Read actions
    # ------------------------
    def index(self, user, *, section_id=None, search=None, order=None, page=1):
        blocks = self.store.list(
            self.content_type,
            section_id=section_id,
            search=search,
            order=order,
            page=page,
        )
        self.permissions.check(Action.LIST, user, None)
        return self._render("index", blocks=blocks)

    def show(self, user, block_id):
        block = self._load_block_draft(Action.SHOW, user, block_id)
        return self._render("show", block=block)

    def version(self, user, block_id, version=None):
        block = self._load_block(Action.SHOW_VERSION, user, block_id)
        if version:
            block = self.versioning.load_as_of(block, version)
        return self._render("show", block=block)

    def versions(self, user, block_id):
        if not self.versioned:
            return ActionResult(kind="text", body="Not Implemented", status=501)

        block = self._load_block(Action.LIST_VERSIONS, user, block_id)
        return self._render(
            "versions",
            block=block,
            versions=self.versioning.versions(block),
        )

    def usages(self, user, block_id):
        block = self._load_block_draft(Action.USAGES, user, block_id)
        return self._render(
            "usages",
            block=block,
            pages=self.store.connected_pages(block),
        )

    def new(self, user, *, fields=None, parent_id=None):
        block = self._build_block(Action.NEW, user, fields, parent_id)
        self._set_default_category(block)
        return self._render("new", block=block, parent=self._default_parent())

    def edit(self, user, block_id):
        block = self._load_block_draft(Action.EDIT, user, block_id)
        return self._render("edit", block=block, parent=self._default_parent())

    def view_as_page(self, user, slug, *, view_mode=False):
        block = self.store.find_by_slug(self.content_type, slug)
        if not block:
            raise ContentNotFound(f"No Content at {self.content_type.calculate_path(slug)}")

        if user.can_edit(block) and not view_mode:
            return ActionResult(
                kind="render",
                view=f"{self.template_directory}/view_as_page",
                data={"page": block, "page_title": block.page_title},
                layout="cms/block_editor",
                toolbar_tab=self.toolbar_tab,
            )

        self.permissions.ensure_can_view(user, block)
        page = block if user.can_edit(block) else self.versioning.load_published(block)
        if page is None:
            raise ContentNotFound(f"No Content at {self.content_type.calculate_path(slug)}")

        return ActionResult(
            kind="render",
            view=f"{self.template_directory}/view",
            data={"page": page, "page_title": page.page_title},
            layout="templates/default",
        )

    # ------------------------
    # Create / update
    # ------------------------
    def create(
        self,
        user,
        fields,
        *,
        parent_id=None,
        redirect_to=None,
        connect_to_page_id=None,
        connect_to_container=None,
    ):
        block = None
        try:
            block = self._build_block(Action.CREATE, user, fields or {}, parent_id)

            # Resolved before saving so a bad page id stores nothing
            page = None
            if self.content_type.connectable and connect_to_page_id:
                page = self.store.find_page(connect_to_page_id)

            if not self.store.save(block, actor_id=user.id):
                return self._after_create_on_failure(block)

            if self._publish_on_save(fields):
                self.versioning.publish(block, actor_id=user.id)

            if page is not None:
                self.store.connect(block, page, connect_to_container, actor_id=user.id)

            return self._after_create_on_success(block, redirect_to)

        except Exception as exc:
            if isinstance(exc, AccessDenied):
                raise
            return self._after_create_on_error(exc, block)

    def update(self, user, block_id, fields, *, redirect_to=None, if_unmodified_since=None):
        fields = dict(fields or {})
        block = None
        try:
            block = self._load_block(Action.UPDATE, user, block_id)
            updated = self.store.update(
                block,
                fields,
                actor_id=user.id,
                lock_version=fields.get("lock_version"),
                if_unmodified_since=if_unmodified_since,
            )
            if updated:
                return self._after_update_on_success(block, redirect_to)
            return self._after_update_on_failure(block)

        except EditConflict as exc:
            return self._after_update_on_edit_conflict(block, fields, exc)

        except Exception as exc:
            if isinstance(exc, AccessDenied):
                raise
            return self._after_update_on_error(exc, block)

    # ------------------------
    # Commands
    # ------------------------
    def destroy(self, user, block_id, *, redirect_to=None):
        _, flash = self._do_command(
            Action.DESTROY, user, block_id, "deleted",
            lambda block: self.store.delete(block, actor_id=user.id),
        )
        return self._redirect(redirect_to_first(redirect_to, self.blocks_path()), flash)

    def publish(self, user, block_id, *, redirect_to=None):
        block, flash = self._do_command(
            Action.PUBLISH, user, block_id, "published",
            lambda block: self.versioning.publish(block, actor_id=user.id),
        )
        return self._redirect(redirect_to_first(redirect_to, self.block_path(block)), flash)

    def revert_to(self, user, block_id, version, *, redirect_to=None):
        block, flash = self._do_command(
            Action.REVERT, user, block_id, f"reverted to version {version}",
            lambda block: self.versioning.revert(block, version, actor_id=user.id),
        )
        return self._redirect(redirect_to_first(redirect_to, self.block_path(block)), flash)

    # ------------------------
    # Helpers
    # ------------------------
    def _load_block(self, action, user, block_id):
        block = self.store.find(self.content_type, block_id)
        self.permissions.check(action, user, block)
        return block

    def _load_block_draft(self, action, user, block_id):
        block = self.store.find(self.content_type, block_id)
        if self.versioned:
            block = self.versioning.load_draft(block)
        self.permissions.check(action, user, block)
        return block

    def _build_block(self, action, user, fields, parent_id):
        if fields:
            fields = {"publish_on_save": False, **fields}
        block = self.store.build(self.content_type, fields)
        if parent_id:
            block.section_id = self.store.find_section(parent_id).id
        self.permissions.check(action, user, block)
        return block

    def _set_default_category(self, block):
        if not self.content_type.supports_categories or block.category_id:
            return
        last_block = self.store.last_created(self.content_type)
        if last_block:
            block.category_id = last_block.category_id

    def _default_parent(self):
        return self.store.default_parent(self.content_type)

    def _publish_on_save(self, fields):
        return (fields or {}).get("publish_on_save", False) in TRUE_VALUES

    def _do_command(self, action, user, block_id, result, command: Callable):
        """
        Runs `command` on the loaded block and reports the outcome as a
        flash message. The command returns something truthy on success.
        """
        block = self._load_block(action, user, block_id)
        label = f"{self.display_name} '{block.name}'"

        if command(block):
            flash = {"notice": f"{label} was {result}"}
        else:
            flash = {"error": f"{label} could not be {result}"}
        return block, flash

    def _after_create_on_success(self, block, redirect_to):
        draft = self.versioning.load_draft(block) if self.versioned else block
        flash = {"notice": f"{self.display_name} '{draft.name}' was created"}

        if self.content_type.connectable and block.connected_page:
            return self._redirect(block.connected_page.path, flash)
        return self._redirect(redirect_to_first(redirect_to, self.block_path(block)), flash)

    def _after_create_on_failure(self, block):
        return self._render("new", status=422, block=block, parent=self._default_parent())

    def _after_create_on_error(self, exc, block):
        current_app.logger.exception("Error creating %s: %s", self.display_name, exc)
        db.session.rollback()
        return self._after_create_on_failure(block)

    def _after_update_on_success(self, block, redirect_to):
        flash = {"notice": f"{self.display_name} '{block.name}' was updated"}
        return self._redirect(redirect_to_first(redirect_to, self.block_path(block)), flash)

    def _after_update_on_failure(self, block, status=422, **data):
        return self._render(
            "edit",
            status=status,
            block=block,
            parent=self._default_parent(),
            **data,
        )

    def _after_update_on_error(self, exc, block):
        current_app.logger.exception("Error updating %s: %s", self.display_name, exc)
        db.session.rollback()
        return self._after_update_on_failure(block)

    def _after_update_on_edit_conflict(self, block, submitted, exc):
        current_app.logger.info("Edit conflict on %s: %s", self.display_name, exc)
        db.session.rollback()
        other_version = self.store.find(self.content_type, block.id)
        return self._after_update_on_failure(
            other_version,
            status=409,
            other_version=other_version,
            submitted=submitted,
        )

    def _render(self, name, status=200, **data):
        return ActionResult(
            kind="render",
            view=f"{self.template_directory}/{name}",
            data=data,
            status=status,
            toolbar_tab=self.toolbar_tab,
        )

    def _redirect(self, location, flash):
        return ActionResult(
            kind="redirect",
            location=location,
            flash=flash,
            status=303,
            toolbar_tab=self.toolbar_tab,
        )
