"""CSV exports for admin reporting."""

import csv
import io
import re
from datetime import datetime
from typing import Any, Iterable

from sqlalchemy.orm import Session

from securebond.db.models import CheckIn, Client, Payment

# Spreadsheet formula prefixes neutralized on export
CSV_DANGEROUS_PREFIXES = ("=", "+", "-", "@", "\t", "\r")
# E.164 phone numbers start with "+" but cannot carry a formula
E164_PHONE = re.compile(r"\+\d+")


def _csv_safe(value: str) -> str:
    if value and value.startswith(CSV_DANGEROUS_PREFIXES) and not E164_PHONE.fullmatch(value):
        return f"'{value}"
    return value


def _serialize_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, str):
        return _csv_safe(value)
    return str(value)


def _write_csv(headers: list[str], rows: Iterable[list[Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(headers)
    for row in rows:
        writer.writerow([_serialize_value(v) for v in row])
    return buffer.getvalue()


def export_clients(db: Session) -> tuple[str, int]:
    clients = db.query(Client).order_by(Client.full_name).all()
    headers = [
        "Client ID", "Full Name", "Phone Number", "Email", "Address",
        "Date of Birth", "Is Active", "Last Check-In", "Missed Check-Ins", "Created At",
    ]
    rows = (
        [
            c.client_number, c.full_name, c.phone_number, c.email, c.address,
            c.date_of_birth, c.is_active, c.last_check_in_at, c.missed_check_ins, c.created_at,
        ]
        for c in clients
    )
    return _write_csv(headers, rows), len(clients)


def export_payments(db: Session) -> tuple[str, int]:
    payments = db.query(Payment, Client).join(Client, Client.id == Payment.client_id).order_by(
        Payment.payment_date.desc()
    ).all()
    headers = ["Payment Date", "Client ID", "Client Name", "Amount", "Method", "Confirmed", "Confirmed At", "Notes"]
    rows = (
        [
            p.payment_date, c.client_number, c.full_name, p.amount, p.payment_method,
            p.confirmed, p.confirmed_at, p.notes,
        ]
        for p, c in payments
    )
    return _write_csv(headers, rows), len(payments)


def export_check_ins(db: Session) -> tuple[str, int]:
    check_ins = db.query(CheckIn, Client).join(Client, Client.id == CheckIn.client_id).order_by(
        CheckIn.check_in_time.desc()
    ).all()
    headers = [
        "Check-In Time", "Client ID", "Client Name", "Location", "Latitude",
        "Longitude", "Within Jurisdiction", "Source", "Notes",
    ]
    rows = (
        [
            ci.check_in_time, c.client_number, c.full_name, ci.location, ci.latitude,
            ci.longitude, ci.within_jurisdiction, ci.source, ci.notes,
        ]
        for ci, c in check_ins
    )
    return _write_csv(headers, rows), len(check_ins)


EXPORTERS = {
    "clients": export_clients,
    "payments": export_payments,
    "check-ins": export_check_ins,
}
