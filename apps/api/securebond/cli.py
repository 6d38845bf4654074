"""CLI tools for SecureBond administration."""

import click

from securebond.core.structured_logging import configure_logging
from securebond.db.enums import Role, STAFF_ROLES
from securebond.db.session import SessionLocal
from securebond.services import (
    check_in_service,
    company_service,
    reminder_service,
    user_service,
)


@click.group()
def cli():
    """SecureBond CLI tools."""
    configure_logging()


@cli.command()
@click.option("--email", required=True, help="Login email")
@click.option("--name", "display_name", required=True, help="Display name")
@click.option(
    "--role",
    type=click.Choice(sorted(r.value for r in STAFF_ROLES)),
    default=Role.ADMIN.value,
    show_default=True,
)
@click.password_option(help="Initial password (prompted when omitted)")
def create_staff(email: str, display_name: str, role: str, password: str):
    """
    Create an admin or maintenance account.

    Example:
        securebond create-staff --email admin@example.com --name "Office Admin"
    """
    db = SessionLocal()
    try:
        user = user_service.create_staff_user(db, email, display_name, password, Role(role))
        click.echo(f"✓ Created {user.role} account: {user.email}")
        click.echo(f"  ID: {user.id}")
    except ValueError as e:
        db.rollback()
        raise click.ClickException(str(e))
    finally:
        db.close()


@cli.command()
def seed_company():
    """Insert the default company configuration if none exists."""
    db = SessionLocal()
    try:
        config = company_service.seed_default_configuration(db)
        click.echo(f"✓ Company configuration: {config.company_name} ({config.timezone})")
    finally:
        db.close()


@cli.command()
def send_court_reminders():
    """Deliver court reminders that are due (same job as /internal/scheduled/court-reminders)."""
    db = SessionLocal()
    try:
        result = reminder_service.process_pending_reminders(db)
        click.echo(
            f"✓ Court reminders: {result['sent']} sent, {result['suppressed']} suppressed, "
            f"{result['deferred']} deferred, {result['failed']} failed (of {result['due']} due)"
        )
    finally:
        db.close()


@cli.command()
def check_missed_check_ins():
    """Flag clients overdue on their check-in."""
    db = SessionLocal()
    try:
        result = check_in_service.sweep_missed_check_ins(db)
        click.echo(
            f"✓ Missed check-ins: {result['clients_flagged']} clients flagged, "
            f"{result['alerts_raised']} alerts raised"
        )
    finally:
        db.close()


if __name__ == "__main__":
    cli()
