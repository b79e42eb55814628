#!/usr/bin/env python
"""Create or update the vendor record for an identity-provider user.

The user itself lives in the identity provider; this only maintains the
matching `vendors` row (one per user id).

Usage:
    python backend/scripts/setup_vendor_user.py USER_ID "Company Name" "Contact Name" contact@example.com
    python backend/scripts/setup_vendor_user.py USER_ID "Company" "Contact" contact@example.com --phone "+852 1234 5678"
    python backend/scripts/setup_vendor_user.py ... --dry-run    # run logic then rollback (no DB changes)
"""
from __future__ import annotations
import os, sys, argparse, textwrap
from sqlalchemy import select, text

# Allow running from repo root
sys.path.append(os.path.abspath('backend'))

from cpd_portal import create_app, get_db  # type: ignore
from cpd_portal.models.vendor import Vendor


def upsert_vendor(session, user_id: str, company_name: str, contact_name: str, contact_email: str, contact_phone=None):
    """Return (vendor, created) keyed on user_id."""
    vendor = session.execute(select(Vendor).where(Vendor.user_id == user_id)).scalar_one_or_none()
    created = vendor is None
    if created:
        vendor = Vendor(user_id=user_id)
        session.add(vendor)
    vendor.company_name = company_name
    vendor.contact_name = contact_name
    vendor.contact_email = contact_email
    vendor.contact_phone = contact_phone or None
    session.flush()
    return vendor, created


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="Set up the vendor record for an identity-provider user",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""Examples:\n  setup_vendor_user.py 7d3c... "Acme Ltd" "Jane Chan" jane@acme.example\n  dry run: setup_vendor_user.py ... --dry-run\n""")
    )
    p.add_argument('user_id', help='Identity-provider user id (token subject)')
    p.add_argument('company_name')
    p.add_argument('contact_name')
    p.add_argument('contact_email')
    p.add_argument('--phone', dest='contact_phone', help='Optional contact phone')
    p.add_argument('--dry-run', action='store_true', help='Rollback after operations (no commit)')
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    app = create_app()
    with app.app_context():
        session = get_db()
        try:
            # Ensure tables exist (lightweight fallback if migrations not run yet)
            session.execute(text('SELECT 1 FROM vendors LIMIT 1'))
        except Exception:
            session.rollback()
            # Auto-create schema for bootstrap; in real env prefer alembic upgrade
            from cpd_portal.models.base import Base  # local import to avoid circular
            import cpd_portal.models.vendor_request  # noqa: F401
            Base.metadata.create_all(session.get_bind())
        try:
            vendor, created = upsert_vendor(
                session, args.user_id, args.company_name, args.contact_name, args.contact_email, args.contact_phone
            )
            action = 'created' if created else 'updated'
            if args.dry_run:
                session.rollback()
                print(f"[DRY-RUN] (rolled back) Vendor would be {action} for user {args.user_id}")
            else:
                session.commit()
                print(f"[DONE] Vendor {action}: id={vendor.id} user={args.user_id} company={vendor.company_name}")
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
    return 0

if __name__ == '__main__':
    sys.exit(main())
