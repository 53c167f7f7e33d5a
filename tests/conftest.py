import pytest
from flask_jwt_extended import create_access_token

from blockcms import create_app
from blockcms.extensions import db
from blockcms.content_types import seed_content_types
from blockcms.application.cms.block_controller import BlockLifecycleController
from blockcms.models import Category, Guest, Page, Section, User


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        seed_content_types()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def _make_user(email, role):
    user = User()
    user.email = email
    user.role = role
    user.set_password("secret")
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def admin(app):
    return _make_user("admin@example.com", "admin")


@pytest.fixture
def editor(app):
    return _make_user("editor@example.com", "editor")


@pytest.fixture
def member(app):
    # Logged in, but without CMS access
    return _make_user("member@example.com", "user")


@pytest.fixture
def guest():
    return Guest()


@pytest.fixture
def auth_headers(app):
    def _headers(user):
        token = create_access_token(identity=user.id)
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def news(app):
    return BlockLifecycleController.for_type("news_release")


@pytest.fixture
def html(app):
    return BlockLifecycleController.for_type("html_block")


@pytest.fixture
def links(app):
    return BlockLifecycleController.for_type("link")


@pytest.fixture
def make_block(app):
    """Persist a block directly through the store, bypassing the controller."""
    def _make(controller, **fields):
        block = controller.store.build(controller.content_type, fields)
        assert controller.store.save(block), block.errors
        return block
    return _make


@pytest.fixture
def release_fields():
    return {
        "name": "Spring Launch",
        "summary": "We launched",
        "body": "All the details",
        "release_date": "2024-03-15",
    }


@pytest.fixture
def section(app):
    section = Section()
    section.name = "News"
    section.path = "news_releases"
    db.session.add(section)
    db.session.commit()
    return section


@pytest.fixture
def page(app):
    page = Page()
    page.name = "Home"
    page.path = "/home"
    db.session.add(page)
    db.session.commit()
    return page


@pytest.fixture
def press_category(app):
    category = Category()
    category.name = "Press"
    category.content_type_key = "news_release"
    db.session.add(category)
    db.session.commit()
    return category
