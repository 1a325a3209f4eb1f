import logging

import click
from flask.cli import with_appcontext

from .auth import ROLE_ADMIN, hash_password
from .db import execute_db, init_db
from .models import get_user_row_by_email
from .validation import MIN_PASSWORD_LENGTH, validate_email

logger = logging.getLogger(__name__)


@click.command("create-admin")
@click.option("--name", required=True)
@click.option("--email", required=True)
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
@with_appcontext
def create_admin_command(name, email, password):
    """Create an admin user, or promote the user that owns EMAIL."""
    email = email.strip().lower()
    if not validate_email(email):
        raise click.BadParameter("invalid email", param_hint="--email")
    init_db()
    existing = get_user_row_by_email(email)
    if existing:
        execute_db("UPDATE users SET role = ? WHERE id = ?", (ROLE_ADMIN, existing["id"]))
        click.echo(f"Promoted {email} to admin")
        return
    if len(password) < MIN_PASSWORD_LENGTH:
        raise click.BadParameter(
            f"password must be at least {MIN_PASSWORD_LENGTH} characters", param_hint="--password"
        )
    execute_db(
        "INSERT INTO users (name, email, password_hash, role) VALUES (?, ?, ?, ?)",
        (name.strip(), email, hash_password(password), ROLE_ADMIN),
    )
    logger.info("Created admin %s", email)
    click.echo(f"Created admin {email}")


def init_app(app):
    app.cli.add_command(create_admin_command)
