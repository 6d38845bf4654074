"""Tests for the securebond admin CLI."""

from click.testing import CliRunner

from securebond.cli import cli
from securebond.db.models import CompanyConfiguration, User


def test_create_staff(db):
    result = CliRunner().invoke(
        cli,
        ["create-staff", "--email", "Front.Desk@AlohaBailBonds.com", "--name", "Front Desk",
         "--role", "maintenance", "--password", "DeskPass123!"],
    )
    assert result.exit_code == 0, result.output
    assert "Created maintenance account: front.desk@alohabailbonds.com" in result.output

    user = db.query(User).one()
    assert user.role == "maintenance"


def test_create_staff_duplicate_email(db, admin_user):
    result = CliRunner().invoke(
        cli,
        ["create-staff", "--email", admin_user.email, "--name", "Again", "--password", "AdminPass123!"],
    )
    assert result.exit_code == 1
    assert "already exists" in result.output


def test_create_staff_rejects_client_role(db):
    result = CliRunner().invoke(
        cli,
        ["create-staff", "--email", "x@alohabailbonds.com", "--name", "X", "--role", "client",
         "--password", "Whatever123!"],
    )
    assert result.exit_code == 2


def test_seed_company(db):
    result = CliRunner().invoke(cli, ["seed-company"])
    assert result.exit_code == 0, result.output
    assert "Pacific/Honolulu" in result.output
    assert db.query(CompanyConfiguration).count() == 1


def test_scheduled_jobs_report_counts(db):
    result = CliRunner().invoke(cli, ["send-court-reminders"])
    assert "0 sent" in result.output

    result = CliRunner().invoke(cli, ["check-missed-check-ins"])
    assert "0 clients flagged" in result.output
