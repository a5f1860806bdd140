# invoice_manager/models/clients.py

from datetime import date, datetime
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator

from invoice_manager.models.common import CamelModel


class ClientPurchaseOrder(CamelModel):
    po_number: Optional[str] = None
    po_date: Optional[date] = None


class ContactDetails(CamelModel):
    email: Optional[EmailStr] = None
    phone: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def normalise_email(cls, value):
        if isinstance(value, str):
            value = value.strip().lower()
            return value or None
        return value


class ClientCreate(CamelModel):
    username: str = Field(..., min_length=1)
    client_name: str = Field(..., min_length=1)
    billing_address: str = Field(..., min_length=1)
    shipping_address: str = Field(..., min_length=1)
    gstin: str = Field(..., min_length=1)
    contact_person: Optional[str] = None
    contact_details: ContactDetails = Field(default_factory=ContactDetails)


class ClientRecord(ClientCreate):
    """Full stored shape of a client, used to re-validate merged updates."""

    pos: List[ClientPurchaseOrder] = Field(default_factory=list)


class ClientUpdate(CamelModel):
    username: Optional[str] = None
    client_name: Optional[str] = None
    billing_address: Optional[str] = None
    shipping_address: Optional[str] = None
    gstin: Optional[str] = None
    contact_person: Optional[str] = None
    contact_details: Optional[ContactDetails] = None
    pos: Optional[List[ClientPurchaseOrder]] = None


class ClientOut(ClientRecord):
    id: str
    created_at: datetime
    updated_at: datetime


class ClientEnvelope(CamelModel):
    message: str
    client: ClientOut
