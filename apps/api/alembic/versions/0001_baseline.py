"""Baseline migration - SecureBond schema

Revision ID: 0001_baseline
Revises: 
Create Date: 2025-06-01

Creates every table of the bail bond case-management schema.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '0001_baseline'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSON = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")
TIMESTAMP = sa.DateTime(timezone=True)
MONEY = sa.Numeric(12, 2)


def upgrade() -> None:
    """Create all tables."""

    # ==========================================================================
    # Staff users
    # ==========================================================================
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('display_name', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('token_version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('last_login_at', TIMESTAMP, nullable=True),
        sa.Column('created_at', TIMESTAMP, nullable=False),
        sa.Column('updated_at', TIMESTAMP, nullable=False),
    )

    # ==========================================================================
    # Clients and money
    # ==========================================================================
    op.create_table(
        'clients',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('client_number', sa.String(32), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(255), nullable=True),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('phone_number', sa.String(32), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('emergency_contact', sa.String(255), nullable=True),
        sa.Column('emergency_phone', sa.String(32), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_check_in_at', TIMESTAMP, nullable=True),
        sa.Column('missed_check_ins', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('missed_check_in_flagged_at', TIMESTAMP, nullable=True),
        sa.Column('token_version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', TIMESTAMP, nullable=False),
        sa.Column('updated_at', TIMESTAMP, nullable=False),
        sa.CheckConstraint('missed_check_ins >= 0', name='ck_clients_missed_check_ins'),
    )
    op.create_index('idx_clients_phone', 'clients', ['phone_number'])
    op.create_index('idx_clients_email', 'clients', ['email'])

    op.create_table(
        'bonds',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('client_id', sa.Uuid(), sa.ForeignKey('clients.id', ondelete='CASCADE'), nullable=False),
        sa.Column('bond_number', sa.String(32), nullable=False, unique=True),
        sa.Column('bond_amount', MONEY, nullable=False),
        sa.Column('total_owed', MONEY, nullable=False),
        sa.Column('down_payment', MONEY, nullable=False, server_default='0'),
        sa.Column('remaining_balance', MONEY, nullable=False),
        sa.Column('premium_rate', sa.Numeric(5, 4), nullable=True),
        sa.Column('court_location', sa.String(255), nullable=True),
        sa.Column('case_number', sa.String(100), nullable=True),
        sa.Column('charges', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('bond_type', sa.String(20), nullable=False, server_default='surety'),
        sa.Column('cosigner_name', sa.String(255), nullable=True),
        sa.Column('cosigner_phone', sa.String(32), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('issued_at', TIMESTAMP, nullable=False),
        sa.Column('created_at', TIMESTAMP, nullable=False),
        sa.Column('updated_at', TIMESTAMP, nullable=False),
        sa.CheckConstraint('remaining_balance >= 0', name='ck_bonds_remaining_balance'),
    )
    op.create_index('idx_bonds_client', 'bonds', ['client_id'])
    op.create_index('idx_bonds_status', 'bonds', ['status'])

    op.create_table(
        'payments',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('client_id', sa.Uuid(), sa.ForeignKey('clients.id', ondelete='CASCADE'), nullable=False),
        sa.Column('bond_id', sa.Uuid(), sa.ForeignKey('bonds.id', ondelete='SET NULL'), nullable=True),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('payment_method', sa.String(20), nullable=False, server_default='cash'),
        sa.Column('receipt_image_url', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('confirmed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('confirmed_by_user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('confirmed_at', TIMESTAMP, nullable=True),
        sa.Column('created_at', TIMESTAMP, nullable=False),
        sa.CheckConstraint('amount > 0', name='ck_payments_amount_positive'),
    )
    op.create_index('idx_payments_client', 'payments', ['client_id', 'payment_date'])
    op.create_index('idx_payments_confirmed', 'payments', ['confirmed'])

    op.create_table(
        'check_ins',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('client_id', sa.Uuid(), sa.ForeignKey('clients.id', ondelete='CASCADE'), nullable=False),
        sa.Column('check_in_time', TIMESTAMP, nullable=False),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('accuracy', sa.Float(), nullable=True),
        sa.Column('within_jurisdiction', sa.Boolean(), nullable=True),
        sa.Column('source', sa.String(20), nullable=False, server_default='manual'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', TIMESTAMP, nullable=False),
    )
    op.create_index('idx_check_ins_client_time', 'check_ins', ['client_id', 'check_in_time'])

    op.create_table(
        'expenses',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('description', sa.String(255), nullable=False),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('category', sa.String(100), nullable=True),
        sa.Column('expense_date', sa.Date(), nullable=False),
        sa.Column('created_by_user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', TIMESTAMP, nullable=False),
        sa.CheckConstraint('amount > 0', name='ck_expenses_amount_positive'),
    )

    # ==========================================================================
    # Notifications (court reminders link to them)
    # ==========================================================================
    op.create_table(
        'notifications',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('recipient_type', sa.String(20), nullable=False),
        sa.Column('recipient_id', sa.Uuid(), nullable=False),
        sa.Column('type', sa.String(40), nullable=False),
        sa.Column('priority', sa.String(20), nullable=False, server_default='medium'),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('action_url', sa.String(500), nullable=True),
        sa.Column('metadata', JSON, nullable=True),
        sa.Column('dedupe_key', sa.String(255), nullable=True),
        sa.Column('read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('read_at', TIMESTAMP, nullable=True),
        sa.Column('confirmed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('confirmed_at', TIMESTAMP, nullable=True),
        sa.Column('expires_at', TIMESTAMP, nullable=True),
        sa.Column('created_at', TIMESTAMP, nullable=False),
    )
    op.create_index(
        'idx_notif_recipient_unread', 'notifications',
        ['recipient_type', 'recipient_id', 'read', 'created_at'],
    )
    op.create_index('idx_notif_dedupe', 'notifications', ['dedupe_key', 'created_at'])

    op.create_table(
        'notification_preferences',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('recipient_type', sa.String(20), nullable=False),
        sa.Column('recipient_id', sa.Uuid(), nullable=False),
        sa.Column('court_reminders', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('payment_due', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('compliance_alerts', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('bond_expiring', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('email_court_reminders', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('email_payment_due', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('email_compliance_alerts', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('email_bond_expiring', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('court_reminder_days', sa.Integer(), nullable=False, server_default='3'),
        sa.Column('payment_reminder_days', sa.Integer(), nullable=False, server_default='7'),
        sa.Column('bond_expiring_days', sa.Integer(), nullable=False, server_default='30'),
        sa.Column('quiet_hours_enabled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('quiet_hours_start', sa.String(5), nullable=False, server_default='22:00'),
        sa.Column('quiet_hours_end', sa.String(5), nullable=False, server_default='08:00'),
        sa.Column('updated_at', TIMESTAMP, nullable=False),
        sa.UniqueConstraint('recipient_type', 'recipient_id', name='uq_notif_prefs_recipient'),
    )

    # ==========================================================================
    # Court dates and reminders
    # ==========================================================================
    op.create_table(
        'court_dates',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('client_id', sa.Uuid(), sa.ForeignKey('clients.id', ondelete='CASCADE'), nullable=False),
        sa.Column('court_date', TIMESTAMP, nullable=False),
        sa.Column('court_type', sa.String(30), nullable=False, server_default='hearing'),
        sa.Column('court_location', sa.String(255), nullable=True),
        sa.Column('case_number', sa.String(100), nullable=True),
        sa.Column('charges', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('attendance_status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('admin_approved', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('approved_by_user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('approved_at', TIMESTAMP, nullable=True),
        sa.Column('client_acknowledged', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('acknowledged_at', TIMESTAMP, nullable=True),
        sa.Column('source', sa.String(20), nullable=False, server_default='manual'),
        sa.Column('source_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', TIMESTAMP, nullable=False),
    )
    op.create_index('idx_court_dates_client', 'court_dates', ['client_id', 'court_date'])
    op.create_index('idx_court_dates_pending', 'court_dates', ['admin_approved', 'court_date'])

    op.create_table(
        'court_date_reminders',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('court_date_id', sa.Uuid(), sa.ForeignKey('court_dates.id', ondelete='CASCADE'), nullable=False),
        sa.Column('reminder_type', sa.String(20), nullable=False),
        sa.Column('scheduled_for', TIMESTAMP, nullable=False),
        sa.Column('sent', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('sent_at', TIMESTAMP, nullable=True),
        sa.Column('confirmed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('confirmed_at', TIMESTAMP, nullable=True),
        sa.Column('notification_id', sa.Uuid(), sa.ForeignKey('notifications.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', TIMESTAMP, nullable=False),
    )
    op.create_index('idx_reminders_due', 'court_date_reminders', ['sent', 'scheduled_for'])

    # ==========================================================================
    # Alerts and audit trail
    # ==========================================================================
    op.create_table(
        'alerts',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('client_id', sa.Uuid(), sa.ForeignKey('clients.id', ondelete='CASCADE'), nullable=True),
        sa.Column('alert_type', sa.String(40), nullable=False),
        sa.Column('severity', sa.String(20), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('dedupe_key', sa.String(64), nullable=True),
        sa.Column('occurrence_count', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('last_seen_at', TIMESTAMP, nullable=False),
        sa.Column('acknowledged', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('acknowledged_by_user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('acknowledged_at', TIMESTAMP, nullable=True),
        sa.Column('created_at', TIMESTAMP, nullable=False),
    )
    op.create_index('idx_alerts_open', 'alerts', ['acknowledged', 'created_at'])
    op.create_index('idx_alerts_dedupe', 'alerts', ['dedupe_key'])

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('actor_type', sa.String(20), nullable=False),
        sa.Column('actor_id', sa.Uuid(), nullable=True),
        sa.Column('event_type', sa.String(50), nullable=False),
        sa.Column('target_type', sa.String(50), nullable=True),
        sa.Column('target_id', sa.Uuid(), nullable=True),
        sa.Column('details', JSON, nullable=True),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('user_agent', sa.String(500), nullable=True),
        sa.Column('created_at', TIMESTAMP, nullable=False),
    )
    op.create_index('idx_audit_created', 'audit_logs', ['created_at'])
    op.create_index('idx_audit_event_type', 'audit_logs', ['event_type', 'created_at'])
    op.create_index('idx_audit_actor', 'audit_logs', ['actor_id', 'created_at'])

    # ==========================================================================
    # Legal acknowledgments and company settings
    # ==========================================================================
    for table in ('privacy_acknowledgments', 'terms_acknowledgments'):
        columns = [
            sa.Column('id', sa.Uuid(), primary_key=True),
            sa.Column('principal_type', sa.String(20), nullable=False),
            sa.Column('principal_id', sa.Uuid(), nullable=False),
            sa.Column('version', sa.String(20), nullable=False),
        ]
        if table == 'privacy_acknowledgments':
            columns.append(sa.Column('data_types', JSON, nullable=False))
        columns += [
            sa.Column('ip_address', sa.String(45), nullable=True),
            sa.Column('user_agent', sa.String(500), nullable=True),
            sa.Column('acknowledged_at', TIMESTAMP, nullable=False),
        ]
        op.create_table(table, *columns)
    op.create_index(
        'idx_privacy_ack_principal', 'privacy_acknowledgments',
        ['principal_type', 'principal_id', 'version'],
    )
    op.create_index(
        'idx_terms_ack_principal', 'terms_acknowledgments',
        ['principal_type', 'principal_id', 'version'],
    )

    op.create_table(
        'company_configurations',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('company_name', sa.String(255), nullable=False),
        sa.Column('license_number', sa.String(100), nullable=True),
        sa.Column('state', sa.String(2), nullable=True),
        sa.Column('address', sa.String(255), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('zip_code', sa.String(10), nullable=True),
        sa.Column('phone', sa.String(32), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('website', sa.String(255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('logo_url', sa.Text(), nullable=True),
        sa.Column('timezone', sa.String(50), nullable=False, server_default='Pacific/Honolulu'),
        sa.Column('business_type', sa.String(50), nullable=False, server_default='bail_bonds'),
        sa.Column('operating_hours', JSON, nullable=True),
        sa.Column('custom_settings', JSON, nullable=True),
        sa.Column('jurisdiction_min_latitude', sa.Float(), nullable=True),
        sa.Column('jurisdiction_max_latitude', sa.Float(), nullable=True),
        sa.Column('jurisdiction_min_longitude', sa.Float(), nullable=True),
        sa.Column('jurisdiction_max_longitude', sa.Float(), nullable=True),
        sa.Column('updated_at', TIMESTAMP, nullable=False),
    )


def downgrade() -> None:
    """Drop all tables (reverse dependency order)."""
    for table in (
        'company_configurations',
        'terms_acknowledgments',
        'privacy_acknowledgments',
        'audit_logs',
        'alerts',
        'court_date_reminders',
        'court_dates',
        'notification_preferences',
        'notifications',
        'expenses',
        'check_ins',
        'payments',
        'bonds',
        'clients',
        'users',
    ):
        op.drop_table(table)
