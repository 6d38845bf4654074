"""Audit event enums."""

from enum import Enum


class AuditEventType(str, Enum):
    """Security and compliance events recorded in the audit log."""

    # Authentication
    AUTH_LOGIN_SUCCESS = "auth_login_success"
    AUTH_LOGIN_FAILED = "auth_login_failed"
    AUTH_LOGOUT = "auth_logout"

    # Staff accounts
    STAFF_CREATED = "staff_created"
    STAFF_UPDATED = "staff_updated"
    STAFF_DEACTIVATED = "staff_deactivated"
    STAFF_SESSIONS_REVOKED = "staff_sessions_revoked"

    # Clients
    CLIENT_CREATED = "client_created"
    CLIENT_UPDATED = "client_updated"
    CLIENT_DELETED = "client_deleted"
    CLIENT_PASSWORD_RESET = "client_password_reset"
    CLIENT_BULK_UPLOAD = "client_bulk_upload"

    # Money
    PAYMENT_CREATED = "payment_created"
    PAYMENT_CONFIRMED = "payment_confirmed"
    BOND_CREATED = "bond_created"
    BOND_UPDATED = "bond_updated"
    BOND_DELETED = "bond_deleted"
    EXPENSE_CREATED = "expense_created"

    # Court dates
    COURT_DATE_CREATED = "court_date_created"
    COURT_DATE_APPROVED = "court_date_approved"
    COURT_DATE_UPDATED = "court_date_updated"
    COURT_DATE_DELETED = "court_date_deleted"
    COURT_ATTENDANCE_RECORDED = "court_attendance_recorded"

    # Compliance
    CHECK_IN_RECORDED = "check_in_recorded"
    JURISDICTION_VIOLATION = "jurisdiction_violation"
    ALERT_ACKNOWLEDGED = "alert_acknowledged"

    # Legal documents
    PRIVACY_ACKNOWLEDGED = "privacy_acknowledged"
    TERMS_ACKNOWLEDGED = "terms_acknowledged"

    # Settings and data
    COMPANY_CONFIG_UPDATED = "company_config_updated"
    DATA_EXPORTED = "data_exported"
