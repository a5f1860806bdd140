# invoice_manager/api/clients.py

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from sqlalchemy import select
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError

from invoice_manager.db.engine import get_engine
from invoice_manager.db.schema import clients, new_id, utcnow
from invoice_manager.models.clients import (
    ClientCreate,
    ClientEnvelope,
    ClientOut,
    ClientRecord,
    ClientUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["clients"])


def _row_to_client(row) -> ClientOut:
    return ClientOut(
        id=row["id"],
        username=row["username"],
        client_name=row["client_name"],
        billing_address=row["billing_address"],
        shipping_address=row["shipping_address"],
        gstin=row["gstin"],
        contact_person=row["contact_person"],
        contact_details=row["contact_details"] or {},
        pos=row["pos"] or [],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _client_values(record: ClientCreate) -> dict:
    values = {
        "username": record.username,
        "client_name": record.client_name,
        "billing_address": record.billing_address,
        "shipping_address": record.shipping_address,
        "gstin": record.gstin,
        "contact_person": record.contact_person,
        "contact_details": record.contact_details.model_dump(mode="json", by_alias=True),
    }
    if isinstance(record, ClientRecord):
        values["pos"] = [po.model_dump(mode="json", by_alias=True) for po in record.pos]
    return values


def _select_client(conn: Connection, client_id: str) -> Optional[dict]:
    stmt = select(clients).where(clients.c.id == client_id)
    return conn.execute(stmt).mappings().first()


def _not_found(client_id: str) -> HTTPException:
    logger.warning("Client %s not found", client_id)
    return HTTPException(status_code=404, detail="Client not found")


def _duplicate_username(username: str) -> HTTPException:
    logger.warning("Rejected duplicate username %r", username)
    return HTTPException(
        status_code=400,
        detail=f"Client with username {username!r} already exists",
    )


@router.post("/api/clients", response_model=ClientEnvelope, status_code=201)
@router.post(
    "/create-client",
    response_model=ClientEnvelope,
    status_code=201,
    include_in_schema=False,
)
def create_client(payload: ClientCreate) -> ClientEnvelope:
    """
    Create a client. username, clientName, billingAddress, shippingAddress
    and gstin are required; username must be unique.
    """
    engine = get_engine()
    client_id = new_id()
    now = utcnow()

    try:
        with engine.begin() as conn:
            conn.execute(
                clients.insert().values(
                    id=client_id,
                    pos=[],
                    created_at=now,
                    updated_at=now,
                    **_client_values(payload),
                )
            )
            row = _select_client(conn, client_id)
    except IntegrityError:
        raise _duplicate_username(payload.username)

    logger.info("Created client %s (%s)", client_id, payload.username)
    return ClientEnvelope(message="Client created successfully", client=_row_to_client(row))


@router.get("/api/clients", response_model=List[ClientOut])
def list_clients() -> List[ClientOut]:
    """
    Return all clients. No paging or filtering; the UI filters locally.
    """
    engine = get_engine()

    with engine.connect() as conn:
        stmt = select(clients).order_by(clients.c.created_at)
        rows = conn.execute(stmt).mappings().all()

    return [_row_to_client(row) for row in rows]


@router.get("/api/clients/{client_id}", response_model=ClientOut)
def get_client(client_id: str) -> ClientOut:
    engine = get_engine()

    with engine.connect() as conn:
        row = _select_client(conn, client_id)

    if row is None:
        raise _not_found(client_id)

    return _row_to_client(row)


@router.put("/api/clients/{client_id}", response_model=ClientEnvelope)
@router.put("/edit-client/{client_id}", response_model=ClientEnvelope, include_in_schema=False)
def update_client(client_id: str, payload: ClientUpdate) -> ClientEnvelope:
    """
    Partial update: only fields present in the body change. The merged
    client is validated again as a whole before it is written.
    """
    engine = get_engine()
    changes = payload.model_dump(exclude_unset=True)

    try:
        with engine.begin() as conn:
            row = _select_client(conn, client_id)
            if row is None:
                raise _not_found(client_id)

            merged = _row_to_client(row).model_dump(exclude={"id", "created_at", "updated_at"})
            merged.update(changes)
            record = ClientRecord.model_validate(merged)

            conn.execute(
                clients.update()
                .where(clients.c.id == client_id)
                .values(updated_at=utcnow(), **_client_values(record))
            )
            row = _select_client(conn, client_id)
    except IntegrityError:
        raise _duplicate_username(changes.get("username", ""))

    logger.info("Updated client %s (%s)", client_id, ", ".join(sorted(changes)) or "no fields")
    return ClientEnvelope(message="Client updated successfully", client=_row_to_client(row))


@router.delete("/api/clients/{client_id}", response_model=ClientEnvelope)
def delete_client(client_id: str) -> ClientEnvelope:
    """
    Delete a client. Invoices that reference it are left in place.
    """
    engine = get_engine()

    with engine.begin() as conn:
        row = _select_client(conn, client_id)
        if row is None:
            raise _not_found(client_id)
        conn.execute(clients.delete().where(clients.c.id == client_id))

    logger.info("Deleted client %s (%s)", client_id, row["username"])
    return ClientEnvelope(message="Client deleted successfully", client=_row_to_client(row))
