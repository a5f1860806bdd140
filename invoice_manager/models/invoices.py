# invoice_manager/models/invoices.py

from datetime import date, datetime
from typing import Annotated, List, Literal, Optional

from pydantic import BeforeValidator, Field

from invoice_manager.models.common import CamelModel

InvoiceStatus = Literal["draft", "sent", "paid", "overdue", "cancelled"]


def client_ref(value):
    """
    Accept a client id, or an expanded client object as returned by
    GET /api/invoices/{id}, and reduce it to the id.
    """
    if isinstance(value, dict):
        return value.get("id", value.get("_id"))
    return value


ClientRef = Annotated[str, BeforeValidator(client_ref)]


class PurchaseOrderIn(CamelModel):
    po_number: str = Field(..., min_length=1)
    po_date: date


class LineItemIn(CamelModel):
    description: str = Field(..., min_length=1)
    quantity: float = Field(..., ge=1)
    rate: float = Field(..., ge=0)


class LineItem(LineItemIn):
    amount: float = Field(..., ge=0)


class InvoiceIn(CamelModel):
    """
    Payload for creating an invoice. Derived amounts (item amount, subtotal,
    taxAmount, total) are not accepted; they are always recomputed.
    """

    invoice_number: str = Field(..., min_length=1)
    client: ClientRef = Field(..., min_length=1, description="Client id")
    # "date" on the wire; renamed here so it does not shadow datetime.date
    invoice_date: date = Field(default_factory=date.today, alias="date")
    due_date: date
    pos: List[PurchaseOrderIn] = Field(default_factory=list)
    items: List[LineItemIn] = Field(default_factory=list)
    tax_rate: float = Field(..., ge=0, le=100)
    status: InvoiceStatus = "draft"
    notes: Optional[str] = None


class InvoiceUpdate(CamelModel):
    invoice_number: Optional[str] = None
    client: Optional[ClientRef] = None
    invoice_date: Optional[date] = Field(default=None, alias="date")
    due_date: Optional[date] = None
    pos: Optional[List[PurchaseOrderIn]] = None
    items: Optional[List[LineItemIn]] = None
    tax_rate: Optional[float] = None
    status: Optional[InvoiceStatus] = None
    notes: Optional[str] = None


class InvoiceOut(CamelModel):
    id: str
    invoice_number: str
    client: str
    invoice_date: date = Field(..., alias="date")
    due_date: date
    pos: List[PurchaseOrderIn]
    items: List[LineItem]
    subtotal: float
    tax_rate: float
    tax_amount: float
    total: float
    status: InvoiceStatus
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ClientSummary(CamelModel):
    id: str
    client_name: str
    gstin: str


class ClientDetail(ClientSummary):
    billing_address: str
    shipping_address: str


class InvoiceListItem(InvoiceOut):
    # None when the referenced client has been deleted
    client: Optional[ClientSummary] = None


class InvoiceDetail(InvoiceOut):
    client: Optional[ClientDetail] = None


class InvoiceDeleted(CamelModel):
    message: str
