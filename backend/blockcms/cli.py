import click
from flask import Blueprint

from blockcms.extensions import db
from blockcms.content_types import seed_content_types
from blockcms.models.user import User, ROLE_CAPABILITIES

cms_cli = Blueprint("cms", __name__, cli_group="cms")


@cms_cli.cli.command("seed")
def seed():
    """Create the default content types."""
    count = seed_content_types()
    click.echo(f"Seeded {count} content types")


@cms_cli.cli.command("create-user")
@click.argument("email")
@click.argument("password")
@click.option("--role", default="editor", type=click.Choice(sorted(ROLE_CAPABILITIES)))
def create_user(email, password, role):
    """Create a CMS user."""
    if User.query.filter_by(email=email).first():
        raise click.ClickException(f"User {email} already exists")

    user = User()
    user.email = email
    user.role = role
    user.set_password(password)

    db.session.add(user)
    db.session.commit()
    click.echo(f"Created {role} {email}")
