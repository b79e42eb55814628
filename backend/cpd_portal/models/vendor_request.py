from __future__ import annotations
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Text, Date, DateTime, Numeric, ForeignKey, CheckConstraint, func

from .base import Base, new_id, utcnow


class VendorRequest(Base):
    __tablename__ = 'vendor_requests'
    # Status constants
    STATUS_PENDING = 'pending'
    STATUS_APPROVED = 'approved'
    STATUS_REJECTED = 'rejected'
    STATUS_WITHDRAWN = 'withdrawn'
    ALL_STATUSES = (STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED, STATUS_WITHDRAWN)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    vendor_id: Mapped[str] = mapped_column(ForeignKey('vendors.id', ondelete='CASCADE'), nullable=False, index=True)
    event_name: Mapped[str] = mapped_column(String(255), nullable=False)
    event_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    event_end_date: Mapped[date] = mapped_column(Date, nullable=False)
    expected_cpd_points: Mapped[Decimal] = mapped_column(Numeric(4, 2), nullable=False)
    # Contact snapshot copied from the vendor at creation time
    vendor_company_name: Mapped[Optional[str]] = mapped_column(String(200))
    contact_name: Mapped[Optional[str]] = mapped_column(String(150))
    contact_email: Mapped[Optional[str]] = mapped_column(String(254))
    contact_phone: Mapped[Optional[str]] = mapped_column(String(32))
    poster_file_url: Mapped[Optional[str]] = mapped_column(Text)
    expected_promotion_date: Mapped[Optional[date]] = mapped_column(Date)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=STATUS_PENDING, index=True)
    # Written by the administrative approval workflow only
    admin_notes: Mapped[Optional[str]] = mapped_column(Text)
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text)
    approved_by: Mapped[Optional[str]] = mapped_column(String(64))
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    attendance_file_url: Mapped[Optional[str]] = mapped_column(Text)
    attendance_uploaded_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now(), index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow)

    status_history: Mapped[List['StatusHistory']] = relationship(
        'StatusHistory',
        back_populates='request',
        order_by='StatusHistory.created_at',
        cascade='all, delete-orphan',
    )

    __table_args__ = (
        CheckConstraint('event_end_date >= event_start_date', name='ck_vendor_requests_dates'),
        CheckConstraint('expected_cpd_points >= 0.5 AND expected_cpd_points <= 8.0', name='ck_vendor_requests_cpd_points'),
    )


class StatusHistory(Base):
    """Append-only audit trail of status changes for a vendor request."""
    __tablename__ = 'vendor_request_status_history'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    request_id: Mapped[str] = mapped_column(ForeignKey('vendor_requests.id', ondelete='CASCADE'), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    changed_by: Mapped[str] = mapped_column(String(64), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    request = relationship('VendorRequest', back_populates='status_history')

__all__ = ["VendorRequest", "StatusHistory"]
