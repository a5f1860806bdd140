# invoice_manager/api/invoices.py

import logging
import math
from typing import List, Optional, Sequence

from fastapi import APIRouter, HTTPException
from sqlalchemy import select
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError

from invoice_manager.db.engine import get_engine
from invoice_manager.db.schema import clients, invoices, new_id, utcnow
from invoice_manager.models.invoices import (
    ClientDetail,
    ClientSummary,
    InvoiceDeleted,
    InvoiceDetail,
    InvoiceIn,
    InvoiceListItem,
    InvoiceOut,
    InvoiceUpdate,
    PurchaseOrderIn,
)
from invoice_manager.services.purchase_orders import ClientNotFoundError, update_client_pos
from invoice_manager.services.totals import compute_totals

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/invoices", tags=["invoices"])


def _invoice_fields(row) -> dict:
    return dict(
        id=row["id"],
        invoice_number=row["invoice_number"],
        client=row["client_id"],
        invoice_date=row["date"],
        due_date=row["due_date"],
        pos=row["pos"] or [],
        items=row["items"] or [],
        subtotal=row["subtotal"],
        tax_rate=row["tax_rate"],
        tax_amount=row["tax_amount"],
        total=row["total"],
        status=row["status"],
        notes=row["notes"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _row_to_invoice(row) -> InvoiceOut:
    return InvoiceOut(**_invoice_fields(row))


def _invoice_values(record: InvoiceIn) -> dict:
    """
    Column values for a validated invoice, with every derived amount recomputed.
    """
    items, totals = compute_totals(record.items, record.tax_rate)
    if not math.isfinite(totals.total):
        logger.warning("Rejected invoice %r: total overflows", record.invoice_number)
        raise HTTPException(status_code=400, detail="Invoice amounts are too large")

    return {
        "invoice_number": record.invoice_number,
        "client_id": record.client,
        "date": record.invoice_date,
        "due_date": record.due_date,
        "pos": [po.model_dump(mode="json", by_alias=True) for po in record.pos],
        "items": [item.model_dump(mode="json", by_alias=True) for item in items],
        "subtotal": totals.subtotal,
        "tax_rate": record.tax_rate,
        "tax_amount": totals.tax_amount,
        "total": totals.total,
        "status": record.status,
        "notes": record.notes,
    }


def _select_invoice(conn: Connection, invoice_id: str) -> Optional[dict]:
    stmt = select(invoices).where(invoices.c.id == invoice_id)
    return conn.execute(stmt).mappings().first()


def _not_found(invoice_id: str) -> HTTPException:
    logger.warning("Invoice %s not found", invoice_id)
    return HTTPException(status_code=404, detail="Invoice not found")


def _duplicate_number(invoice_number: str) -> HTTPException:
    logger.warning("Rejected duplicate invoice number %r", invoice_number)
    return HTTPException(
        status_code=400,
        detail=f"Invoice number {invoice_number!r} already exists",
    )


def _merge_client_pos(engine: Engine, invoice_id: str, client_id: str, pos: Sequence[PurchaseOrderIn]) -> None:
    # Runs in its own transaction: the invoice is already committed and stays
    # committed if this fails.
    try:
        with engine.begin() as conn:
            update_client_pos(conn, client_id, pos)
    except ClientNotFoundError as exc:
        logger.error(
            "Invoice %s saved but client PO update failed: %s", invoice_id, exc
        )
        raise HTTPException(status_code=500, detail="Client not found") from exc


@router.get("", response_model=List[InvoiceListItem])
def list_invoices() -> List[InvoiceListItem]:
    """
    Return all invoices, newest first by creation time, each with a short
    client summary (clientName, gstin).
    """
    engine = get_engine()

    with engine.connect() as conn:
        stmt = (
            select(
                invoices,
                clients.c.id.label("client_ref_id"),
                clients.c.client_name,
                clients.c.gstin,
            )
            .select_from(invoices.outerjoin(clients, invoices.c.client_id == clients.c.id))
            .order_by(invoices.c.created_at.desc())
        )
        rows = conn.execute(stmt).mappings().all()

    items: List[InvoiceListItem] = []

    for row in rows:
        fields = _invoice_fields(row)
        fields["client"] = None
        if row["client_ref_id"] is not None:
            fields["client"] = ClientSummary(
                id=row["client_ref_id"],
                client_name=row["client_name"],
                gstin=row["gstin"],
            )
        items.append(InvoiceListItem(**fields))

    return items


@router.post("", response_model=InvoiceOut, status_code=201)
def create_invoice(payload: InvoiceIn) -> InvoiceOut:
    """
    Create an invoice, then record its POs on the client when any are given.
    """
    engine = get_engine()
    invoice_id = new_id()
    now = utcnow()

    try:
        with engine.begin() as conn:
            conn.execute(
                invoices.insert().values(
                    id=invoice_id,
                    created_at=now,
                    updated_at=now,
                    **_invoice_values(payload),
                )
            )
            row = _select_invoice(conn, invoice_id)
    except IntegrityError:
        raise _duplicate_number(payload.invoice_number)

    logger.info(
        "Created invoice %s (%s) for client %s, total %s",
        invoice_id,
        payload.invoice_number,
        payload.client,
        row["total"],
    )

    if payload.pos:
        _merge_client_pos(engine, invoice_id, payload.client, payload.pos)

    return _row_to_invoice(row)


@router.get("/{invoice_id}", response_model=InvoiceDetail)
def get_invoice(invoice_id: str) -> InvoiceDetail:
    """
    Look up a single invoice by id, with the client's name, GSTIN and addresses.
    """
    engine = get_engine()

    with engine.connect() as conn:
        stmt = (
            select(
                invoices,
                clients.c.id.label("client_ref_id"),
                clients.c.client_name,
                clients.c.gstin,
                clients.c.billing_address,
                clients.c.shipping_address,
            )
            .select_from(invoices.outerjoin(clients, invoices.c.client_id == clients.c.id))
            .where(invoices.c.id == invoice_id)
        )
        row = conn.execute(stmt).mappings().first()

    if row is None:
        raise _not_found(invoice_id)

    fields = _invoice_fields(row)
    fields["client"] = None
    if row["client_ref_id"] is not None:
        fields["client"] = ClientDetail(
            id=row["client_ref_id"],
            client_name=row["client_name"],
            gstin=row["gstin"],
            billing_address=row["billing_address"],
            shipping_address=row["shipping_address"],
        )

    return InvoiceDetail(**fields)


@router.put("/{invoice_id}", response_model=InvoiceOut)
def update_invoice(invoice_id: str, payload: InvoiceUpdate) -> InvoiceOut:
    """
    Partial update. Amounts are recomputed from the resulting items and tax
    rate, and any POs in the body are merged into the invoice's client.
    """
    engine = get_engine()
    changes = payload.model_dump(exclude_unset=True)

    try:
        with engine.begin() as conn:
            row = _select_invoice(conn, invoice_id)
            if row is None:
                raise _not_found(invoice_id)

            merged = _row_to_invoice(row).model_dump(include=set(InvoiceIn.model_fields))
            merged.update(changes)
            record = InvoiceIn.model_validate(merged)

            conn.execute(
                invoices.update()
                .where(invoices.c.id == invoice_id)
                .values(updated_at=utcnow(), **_invoice_values(record))
            )
            row = _select_invoice(conn, invoice_id)
    except IntegrityError:
        raise _duplicate_number(changes.get("invoice_number", ""))

    logger.info("Updated invoice %s (%s)", invoice_id, ", ".join(sorted(changes)) or "no fields")

    if payload.pos:
        _merge_client_pos(engine, invoice_id, record.client, payload.pos)

    return _row_to_invoice(row)


@router.delete("/{invoice_id}", response_model=InvoiceDeleted)
def delete_invoice(invoice_id: str) -> InvoiceDeleted:
    engine = get_engine()

    with engine.begin() as conn:
        result = conn.execute(invoices.delete().where(invoices.c.id == invoice_id))

    if result.rowcount == 0:
        raise _not_found(invoice_id)

    logger.info("Deleted invoice %s", invoice_id)
    return InvoiceDeleted(message="Invoice deleted successfully")
