import time
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime

import pytest
from sqlalchemy import text

from blockcms.application.cms.block_controller import (
    BlockLifecycleController,
    redirect_to_first,
)
from blockcms.application.cms.store import ContentBlockStore
from blockcms.domain.exceptions import AccessDenied, ContentNotFound
from blockcms.extensions import db
from blockcms.models import BlockVersion, ContentBlock


class ExplodingStore(ContentBlockStore):
    def save(self, block, *, actor_id=None):
        raise RuntimeError("disk on fire")


class DenyAll:
    def check(self, action, user, block):
        raise AccessDenied()


def test_redirect_to_first():
    assert redirect_to_first(None, "", "/a", "/b") == "/a"
    assert redirect_to_first(None) is None


def test_unknown_content_type(app):
    with pytest.raises(ContentNotFound):
        BlockLifecycleController.for_type("nope")


# ------------------------
# create
# ------------------------

def test_create_redirects_to_the_new_block(news, editor, release_fields):
    result = news.create(editor, release_fields)

    block = ContentBlock.query.filter_by(slug="spring-launch").one()
    assert result.kind == "redirect"
    assert result.status == 303
    assert result.location == f"/api/v1/content/news_release/{block.id}"
    assert result.flash == {"notice": "News Release 'Spring Launch' was created"}
    assert block.created_by == editor.id
    assert block.published is False


def test_create_honours_redirect_target(news, editor, release_fields):
    result = news.create(editor, release_fields, redirect_to="/dashboard")

    assert result.location == "/dashboard"


def test_create_with_publish_on_save(news, editor, release_fields):
    news.create(editor, {**release_fields, "publish_on_save": "true"})

    block = ContentBlock.query.filter_by(slug="spring-launch").one()
    assert block.published is True
    assert BlockVersion.query.filter_by(block_id=block.id).count() == 1


def test_create_connected_to_a_page(html, editor, page):
    result = html.create(
        editor,
        {"name": "Welcome", "content": "<p>Hi</p>"},
        connect_to_page_id=page.id,
        connect_to_container="sidebar",
    )

    assert result.location == "/home"
    assert result.flash == {"notice": "Text 'Welcome' was created"}

    block = html.store.find_by_slug(html.content_type, "welcome")
    usages = html.usages(editor, block.id)
    assert usages.data["pages"] == [page]


def test_create_with_unknown_page_stores_nothing(html, editor, page):
    fields = {"name": "Welcome", "content": "<p>Hi</p>"}

    result = html.create(editor, fields, connect_to_page_id="no-such-page")

    assert result.view == "cms/blocks/new"
    assert result.status == 422
    assert ContentBlock.query.count() == 0

    retry = html.create(editor, fields, connect_to_page_id=page.id)
    assert retry.kind == "redirect"
    assert retry.location == "/home"


def test_create_with_invalid_fields_rerenders_form(news, editor):
    result = news.create(editor, {"summary": "nameless"})

    assert result.kind == "render"
    assert result.view == "cms/blocks/new"
    assert result.status == 422
    errors = result.data["block"].errors
    assert "name" in errors
    assert "release_date" in errors
    assert ContentBlock.query.count() == 0


def test_create_downgrades_unexpected_errors(news, editor, release_fields):
    controller = BlockLifecycleController(news.content_type, store=ExplodingStore())

    result = controller.create(editor, release_fields)

    assert result.view == "cms/blocks/new"
    assert result.status == 422
    assert result.data["block"].name == "Spring Launch"


def test_create_lets_access_denied_through(news, editor, release_fields):
    controller = BlockLifecycleController(news.content_type, permissions=DenyAll())

    with pytest.raises(AccessDenied):
        controller.create(editor, release_fields)
    assert ContentBlock.query.count() == 0


# ------------------------
# new / edit
# ------------------------

def test_new_defaults_category_and_parent(news, editor, make_block, release_fields,
                                          section, press_category):
    make_block(news, **release_fields, category_id=press_category.id)

    result = news.new(editor)

    assert result.view == "cms/blocks/new"
    assert result.toolbar_tab == "content_library"
    assert result.data["block"].id is None
    assert result.data["block"].category_id == press_category.id
    assert result.data["parent"] is section


def test_new_under_a_parent_section(news, editor, section):
    result = news.new(editor, parent_id=section.id)

    assert result.data["block"].section_id == section.id


def test_edit_requires_edit_permission(news, editor, member, make_block, release_fields):
    block = make_block(news, **release_fields)

    assert news.edit(editor, block.id).data["block"] is block
    with pytest.raises(AccessDenied):
        news.edit(member, block.id)


# ------------------------
# update
# ------------------------

def test_update_success(news, editor, make_block, release_fields):
    block = make_block(news, **release_fields)

    result = news.update(editor, block.id, {"name": "Autumn Launch", "body": "New body"})

    assert result.kind == "redirect"
    assert result.location == news.block_path(block)
    assert result.flash == {"notice": "News Release 'Autumn Launch' was updated"}
    assert block.content["body"] == "New body"
    assert block.content["release_date"] == "2024-03-15"
    assert block.updated_by == editor.id


def test_update_denied_for_user_without_edit_rights(news, member, make_block, release_fields):
    block = make_block(news, **release_fields)

    with pytest.raises(AccessDenied):
        news.update(member, block.id, {"name": "Hijacked"})
    assert block.name == "Spring Launch"


def test_update_with_invalid_fields(news, editor, make_block, release_fields):
    block = make_block(news, **release_fields)

    result = news.update(editor, block.id, {"name": "", "release_date": ""})

    assert result.view == "cms/blocks/edit"
    assert result.status == 422
    assert set(result.data["block"].errors) == {"name", "release_date"}
    assert news.store.find(news.content_type, block.id).name == "Spring Launch"


def test_update_with_stale_lock_version_is_an_edit_conflict(news, editor, admin,
                                                            make_block, release_fields):
    block = make_block(news, **release_fields)
    loaded_at = block.lock_version

    news.update(admin, block.id, {"name": "First Writer", "lock_version": loaded_at})
    result = news.update(editor, block.id, {"name": "Second Writer", "lock_version": loaded_at})

    assert result.view == "cms/blocks/edit"
    assert result.status == 409
    assert result.data["other_version"].name == "First Writer"
    assert result.data["submitted"]["name"] == "Second Writer"
    assert news.store.find(news.content_type, block.id).name == "First Writer"


def test_update_racing_another_writer_is_an_edit_conflict(news, editor, make_block,
                                                         release_fields):
    block = make_block(news, **release_fields)
    block_id, loaded_at = block.id, block.lock_version

    # Another writer bumps the row underneath the loaded object
    db.session.execute(
        text("UPDATE content_blocks SET lock_version = lock_version + 1 WHERE id = :id"),
        {"id": block_id},
    )
    assert block.lock_version == loaded_at

    result = news.update(editor, block_id, {"name": "Late Writer"})

    assert result.view == "cms/blocks/edit"
    assert result.status == 409
    assert result.data["submitted"] == {"name": "Late Writer"}
    assert result.data["other_version"].name == "Spring Launch"


@pytest.fixture
def tokyo_clock(monkeypatch):
    monkeypatch.setenv("TZ", "Asia/Tokyo")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.mark.skipif(not hasattr(time, "tzset"), reason="needs time.tzset")
def test_update_with_current_timestamp_on_non_utc_host(tokyo_clock, news, editor,
                                                       make_block, release_fields):
    block = make_block(news, **release_fields)
    checked_at = format_datetime(datetime.now(timezone.utc) + timedelta(minutes=1), usegmt=True)

    result = news.update(
        editor, block.id, {"name": "On Time"}, if_unmodified_since=checked_at
    )

    assert result.kind == "redirect"
    assert block.name == "On Time"


def test_update_of_missing_block_rerenders_form(news, editor):
    result = news.update(editor, "missing", {"name": "Ghost"})

    assert result.view == "cms/blocks/edit"
    assert result.status == 422
    assert result.data["block"] is None


# ------------------------
# commands
# ------------------------

def test_destroy_requires_publish_rights(news, editor, make_block, release_fields):
    block = make_block(news, **release_fields)

    with pytest.raises(AccessDenied):
        news.destroy(editor, block.id)
    assert ContentBlock.query.count() == 1


def test_destroy_removes_block_and_versions(news, admin, make_block, release_fields):
    block = make_block(news, **release_fields)
    news.versioning.publish(block)
    block_id = block.id

    result = news.destroy(admin, block_id)

    assert result.location == "/api/v1/content/news_release"
    assert result.flash == {"notice": "News Release 'Spring Launch' was deleted"}
    assert ContentBlock.query.count() == 0
    assert BlockVersion.query.filter_by(block_id=block_id).count() == 0


def test_publish_and_revert_flash(news, admin, make_block, release_fields):
    block = make_block(news, **release_fields)

    published = news.publish(admin, block.id, redirect_to="/back")
    assert published.location == "/back"
    assert published.flash == {"notice": "News Release 'Spring Launch' was published"}

    reverted = news.revert_to(admin, block.id, 1)
    assert reverted.location == news.block_path(block)
    assert reverted.flash == {"notice": "News Release 'Spring Launch' was reverted to version 1"}

    missing = news.revert_to(admin, block.id, 9)
    assert missing.flash == {
        "error": "News Release 'Spring Launch' could not be reverted to version 9"
    }


def test_publish_denied_for_editor(news, editor, make_block, release_fields):
    block = make_block(news, **release_fields)

    with pytest.raises(AccessDenied):
        news.publish(editor, block.id)


def test_version_history(news, admin, make_block, release_fields):
    block = make_block(news, **release_fields)
    news.publish(admin, block.id)
    news.update(admin, block.id, {"name": "Second Take"})
    news.publish(admin, block.id)

    history = news.versions(admin, block.id)
    assert history.view == "cms/blocks/versions"
    assert [v.version for v in history.data["versions"]] == [2, 1]

    first = news.version(admin, block.id, 1)
    assert first.view == "cms/blocks/show"
    assert first.data["block"].name == "Spring Launch"


def test_versions_not_implemented_for_unversioned_types(links, admin):
    result = links.versions(admin, "anything")

    assert result.kind == "text"
    assert result.status == 501
    assert result.body == "Not Implemented"


# ------------------------
# view as page
# ------------------------

def test_view_as_page_missing_slug(news, guest):
    with pytest.raises(ContentNotFound) as excinfo:
        news.view_as_page(guest, "nowhere")
    assert "/news_releases/nowhere" in str(excinfo.value)


def test_view_as_page_editor_gets_block_editor(news, editor, make_block, release_fields):
    make_block(news, **release_fields)

    result = news.view_as_page(editor, "spring-launch")
    assert result.view == "cms/blocks/view_as_page"
    assert result.layout == "cms/block_editor"
    assert result.toolbar_tab == "content_library"
    assert result.data["page_title"] == "Spring Launch"

    framed = news.view_as_page(editor, "spring-launch", view_mode=True)
    assert framed.view == "cms/blocks/view"
    assert framed.layout == "templates/default"


def test_view_as_page_hides_unpublished_from_guests(news, guest, make_block, release_fields):
    make_block(news, **release_fields)

    with pytest.raises(AccessDenied):
        news.view_as_page(guest, "spring-launch")


def test_view_as_page_shows_guests_the_published_version(news, guest, admin,
                                                        make_block, release_fields):
    block = make_block(news, **release_fields)
    news.publish(admin, block.id)
    news.update(admin, block.id, {"name": "Unreleased Draft"})

    result = news.view_as_page(guest, "spring-launch")

    assert result.view == "cms/blocks/view"
    assert result.data["page"].name == "Spring Launch"
    assert result.data["page_title"] == "Spring Launch"


# ------------------------
# index
# ------------------------

def test_index_search(html, editor, make_block):
    for name in ("Alpha", "Beta", "Alphabet"):
        make_block(html, name=name, content="<p>x</p>")

    result = html.index(editor, search="alpha")

    assert result.view == "cms/blocks/index"
    assert [b.name for b in result.data["blocks"].items] == ["Alpha", "Alphabet"]


def test_index_paginates(links, editor, make_block):
    for n in range(1, 8):
        make_block(links, name=f"Link {n}", url="https://example.com")

    second_page = links.index(editor, page=2).data["blocks"]

    assert second_page.total == 7
    assert [b.name for b in second_page.items] == ["Link 6", "Link 7"]


def test_index_default_order(links, editor, make_block):
    for name in ("Zeta", "Alpha", "Mu"):
        make_block(links, name=name, url="https://example.com")

    result = links.index(editor)

    assert [b.name for b in result.data["blocks"].items] == ["Alpha", "Mu", "Zeta"]


def test_index_order(links, editor, make_block):
    for n in range(1, 4):
        make_block(links, name=f"Link {n}", url="https://example.com")

    result = links.index(editor, order="-name")

    assert [b.name for b in result.data["blocks"].items] == ["Link 3", "Link 2", "Link 1"]
