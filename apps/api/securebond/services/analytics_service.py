"""
Analytics service - dashboard and reporting aggregates.

All money totals count confirmed payments only unless stated otherwise.
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import distinct, func
from sqlalchemy.orm import Session

from securebond.db.models import CheckIn, Client, CourtDate, Expense, Payment


def _money(value) -> Decimal:
    return Decimal(value or 0).quantize(Decimal("0.01"))


def get_dashboard_stats(db: Session, now: datetime | None = None) -> dict:
    now = now or datetime.now(timezone.utc)

    total_clients = db.query(func.count(Client.id)).scalar() or 0
    active_clients = db.query(func.count(Client.id)).filter(Client.is_active.is_(True)).scalar() or 0
    upcoming_court_dates = db.query(func.count(CourtDate.id)).filter(
        CourtDate.court_date >= now,
        CourtDate.completed.is_(False),
    ).scalar() or 0
    pending_payments = db.query(func.count(Payment.id)).filter(Payment.confirmed.is_(False)).scalar() or 0
    total_revenue = db.query(func.sum(Payment.amount)).filter(Payment.confirmed.is_(True)).scalar()
    pending_amount = db.query(func.sum(Payment.amount)).filter(Payment.confirmed.is_(False)).scalar()

    return {
        "total_clients": total_clients,
        "active_clients": active_clients,
        "upcoming_court_dates": upcoming_court_dates,
        "pending_payments": pending_payments,
        "total_revenue": _money(total_revenue),
        "pending_amount": _money(pending_amount),
    }


def _month_start(day: date, months_back: int) -> date:
    year, month = day.year, day.month - months_back
    while month <= 0:
        month += 12
        year -= 1
    return date(year, month, 1)


def get_overview(db: Session, today: date | None = None) -> dict:
    """
    Financial and compliance overview.

    - monthly_revenue: last 12 months of confirmed payments keyed YYYY-MM
    - client_growth: % change of new clients this month vs last month
    - compliance_rate: % of active clients with no missed check-ins
    """
    today = today or datetime.now(timezone.utc).date()
    start = _month_start(today, 11)

    monthly_revenue = {}
    for offset in range(11, -1, -1):
        month = _month_start(today, offset)
        monthly_revenue[month.strftime("%Y-%m")] = Decimal("0.00")

    payments = db.query(Payment.payment_date, Payment.amount).filter(
        Payment.confirmed.is_(True),
        Payment.payment_date >= start,
    ).all()
    for payment_date, amount in payments:
        key = payment_date.strftime("%Y-%m")
        if key in monthly_revenue:
            monthly_revenue[key] += _money(amount)

    total_revenue = _money(db.query(func.sum(Payment.amount)).filter(Payment.confirmed.is_(True)).scalar())
    total_expenses = _money(db.query(func.sum(Expense.amount)).scalar())

    this_month = _month_start(today, 0)
    last_month = _month_start(today, 1)
    this_month_start = datetime(this_month.year, this_month.month, 1, tzinfo=timezone.utc)
    last_month_start = datetime(last_month.year, last_month.month, 1, tzinfo=timezone.utc)
    new_this_month = db.query(func.count(Client.id)).filter(Client.created_at >= this_month_start).scalar() or 0
    new_last_month = db.query(func.count(Client.id)).filter(
        Client.created_at >= last_month_start,
        Client.created_at < this_month_start,
    ).scalar() or 0
    if new_last_month:
        client_growth = round((new_this_month - new_last_month) / new_last_month * 100, 1)
    else:
        client_growth = 100.0 if new_this_month else 0.0

    active = db.query(func.count(Client.id)).filter(Client.is_active.is_(True)).scalar() or 0
    compliant = db.query(func.count(Client.id)).filter(
        Client.is_active.is_(True),
        Client.missed_check_ins == 0,
    ).scalar() or 0
    compliance_rate = round(compliant / active * 100, 1) if active else 100.0

    return {
        "monthly_revenue": monthly_revenue,
        "total_revenue": total_revenue,
        "total_expenses": total_expenses,
        "net_profit": total_revenue - total_expenses,
        "client_growth": client_growth,
        "compliance_rate": compliance_rate,
    }


def get_top_locations(db: Session, limit: int = 5, days: int | None = None) -> list[dict]:
    """
    Most frequent check-in locations with the clients seen there.

    Counting happens in SQL; only the top `limit` locations load client names.
    """
    filters = [CheckIn.location.is_not(None), CheckIn.location != ""]
    if days:
        filters.append(CheckIn.check_in_time >= datetime.now(timezone.utc) - timedelta(days=days))

    check_ins = func.count(CheckIn.id)
    top = db.query(
        CheckIn.location,
        check_ins,
        func.count(distinct(CheckIn.client_id)),
    ).filter(*filters).group_by(CheckIn.location).order_by(
        check_ins.desc(), CheckIn.location
    ).limit(limit).all()
    if not top:
        return []

    clients: dict[str, dict] = {location: {} for location, _, _ in top}
    rows = db.query(CheckIn.location, CheckIn.client_id, Client.full_name).join(
        Client, Client.id == CheckIn.client_id
    ).filter(*filters, CheckIn.location.in_(list(clients))).distinct()
    for location, client_id, full_name in rows:
        clients[location][client_id] = full_name

    return [
        {
            "location": location,
            "check_ins": count,
            "unique_clients": unique_clients,
            "client_names": sorted(clients[location].values()),
        }
        for location, count, unique_clients in top
    ]
