# invoice_manager/db/schema.py

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    MetaData, Table, Column, String, Float,
    Date, DateTime, JSON, CheckConstraint, Text, Index
)

metadata = MetaData()


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


clients = Table(
    "clients",
    metadata,
    Column("id", String(32), primary_key=True, default=new_id),
    Column("username", String, nullable=False, unique=True),
    Column("client_name", String, nullable=False),
    Column("billing_address", Text, nullable=False),
    Column("shipping_address", Text, nullable=False),
    Column("gstin", String, nullable=False),
    Column("contact_person", String, nullable=True),
    # {"email": ..., "phone": ...}
    Column("contact_details", JSON, nullable=False, default=dict),
    # [{"poNumber": ..., "poDate": "YYYY-MM-DD"}, ...]
    Column("pos", JSON, nullable=False, default=list),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

# client_id is a weak reference: no ForeignKey, deleting a client leaves its invoices alone
invoices = Table(
    "invoices",
    metadata,
    Column("id", String(32), primary_key=True, default=new_id),
    Column("invoice_number", Text, unique=True, nullable=False),
    Column("client_id", String(32), nullable=False),
    Column("date", Date, nullable=False),
    Column("due_date", Date, nullable=False),
    Column("pos", JSON, nullable=False, default=list),
    Column("items", JSON, nullable=False, default=list),
    Column("subtotal", Float, nullable=False),
    Column("tax_rate", Float, nullable=False),
    Column("tax_amount", Float, nullable=False),
    Column("total", Float, nullable=False),
    Column("status", String, nullable=False, default="draft"),
    Column("notes", Text, nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    CheckConstraint("subtotal >= 0", name="ck_invoices_subtotal_nonneg"),
    CheckConstraint("tax_rate >= 0 AND tax_rate <= 100", name="ck_invoices_tax_rate_range"),
    CheckConstraint("tax_amount >= 0", name="ck_invoices_tax_amount_nonneg"),
    CheckConstraint("total >= 0", name="ck_invoices_total_nonneg"),
    CheckConstraint(
        "status IN ('draft', 'sent', 'paid', 'overdue', 'cancelled')",
        name="ck_invoices_status",
    ),
)

Index("ix_invoices_client_id", invoices.c.client_id)
Index("ix_invoices_created_at", invoices.c.created_at)
