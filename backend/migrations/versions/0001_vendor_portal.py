"""vendors, vendor requests and status history

Revision ID: 0001_vendor_portal
Revises: 
Create Date: 2026-10-17
"""
from __future__ import annotations
from alembic import op
import sqlalchemy as sa

revision = '0001_vendor_portal'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('vendors',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('company_name', sa.String(length=200), nullable=False),
        sa.Column('contact_name', sa.String(length=150), nullable=False),
        sa.Column('contact_email', sa.String(length=254), nullable=False),
        sa.Column('contact_phone', sa.String(length=32), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_vendors_user_id', 'vendors', ['user_id'], unique=True)

    op.create_table('vendor_requests',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('vendor_id', sa.String(length=36), sa.ForeignKey('vendors.id', ondelete='CASCADE'), nullable=False),
        sa.Column('event_name', sa.String(length=255), nullable=False),
        sa.Column('event_start_date', sa.Date(), nullable=False),
        sa.Column('event_end_date', sa.Date(), nullable=False),
        sa.Column('expected_cpd_points', sa.Numeric(4, 2), nullable=False),
        sa.Column('vendor_company_name', sa.String(length=200), nullable=True),
        sa.Column('contact_name', sa.String(length=150), nullable=True),
        sa.Column('contact_email', sa.String(length=254), nullable=True),
        sa.Column('contact_phone', sa.String(length=32), nullable=True),
        sa.Column('poster_file_url', sa.Text(), nullable=True),
        sa.Column('expected_promotion_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('admin_notes', sa.Text(), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('approved_by', sa.String(length=64), nullable=True),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('attendance_file_url', sa.Text(), nullable=True),
        sa.Column('attendance_uploaded_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('event_end_date >= event_start_date', name='ck_vendor_requests_dates'),
        sa.CheckConstraint('expected_cpd_points >= 0.5 AND expected_cpd_points <= 8.0', name='ck_vendor_requests_cpd_points'),
    )
    op.create_index('ix_vendor_requests_vendor_id', 'vendor_requests', ['vendor_id'])
    op.create_index('ix_vendor_requests_status', 'vendor_requests', ['status'])
    op.create_index('ix_vendor_requests_created_at', 'vendor_requests', ['created_at'])

    op.create_table('vendor_request_status_history',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('request_id', sa.String(length=36), sa.ForeignKey('vendor_requests.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('changed_by', sa.String(length=64), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_vendor_request_status_history_request_id', 'vendor_request_status_history', ['request_id'])


def downgrade():
    op.drop_index('ix_vendor_request_status_history_request_id', table_name='vendor_request_status_history')
    op.drop_table('vendor_request_status_history')
    op.drop_index('ix_vendor_requests_created_at', table_name='vendor_requests')
    op.drop_index('ix_vendor_requests_status', table_name='vendor_requests')
    op.drop_index('ix_vendor_requests_vendor_id', table_name='vendor_requests')
    op.drop_table('vendor_requests')
    op.drop_index('ix_vendors_user_id', table_name='vendors')
    op.drop_table('vendors')
