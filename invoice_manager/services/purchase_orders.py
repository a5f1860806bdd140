# invoice_manager/services/purchase_orders.py

import logging
from typing import List, Sequence

from sqlalchemy import select
from sqlalchemy.engine import Connection

from invoice_manager.db.schema import clients, utcnow
from invoice_manager.models.clients import ClientPurchaseOrder
from invoice_manager.models.invoices import PurchaseOrderIn

logger = logging.getLogger(__name__)


class ClientNotFoundError(LookupError):
    def __init__(self, client_id: str):
        super().__init__(f"Client not found: {client_id}")
        self.client_id = client_id


def merge_pos(
    existing: Sequence[ClientPurchaseOrder],
    candidates: Sequence[PurchaseOrderIn],
) -> List[ClientPurchaseOrder]:
    """
    Append every candidate whose poNumber is not already on the list.

    Existing entries keep their order and are never modified; matching is an
    exact string comparison on poNumber.
    """
    merged = list(existing)
    seen = {po.po_number for po in merged}

    for po in candidates:
        if po.po_number in seen:
            continue
        merged.append(ClientPurchaseOrder(po_number=po.po_number, po_date=po.po_date))
        seen.add(po.po_number)

    return merged


def update_client_pos(
    conn: Connection, client_id: str, pos: Sequence[PurchaseOrderIn]
) -> List[ClientPurchaseOrder]:
    """
    Merge pos into the client's stored PO list and write the whole list back.

    Raises ClientNotFoundError if client_id does not resolve.
    """
    stmt = select(clients.c.pos).where(clients.c.id == client_id)
    row = conn.execute(stmt).mappings().first()

    if row is None:
        raise ClientNotFoundError(client_id)

    existing = [ClientPurchaseOrder.model_validate(po) for po in row["pos"] or []]
    merged = merge_pos(existing, pos)

    conn.execute(
        clients.update()
        .where(clients.c.id == client_id)
        .values(
            pos=[po.model_dump(mode="json", by_alias=True) for po in merged],
            updated_at=utcnow(),
        )
    )

    logger.info(
        "Client %s POs: %s existing, %s added",
        client_id,
        len(existing),
        len(merged) - len(existing),
    )
    return merged
