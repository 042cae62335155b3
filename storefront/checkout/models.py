from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Address(BaseModel):
    """Instantané de l'adresse de livraison choisie au moment du checkout."""
    name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None


class CheckoutMetadata(BaseModel):
    """
    Métadonnées d'une tentative de checkout (immuables).
    Transmises telles quelles à Stripe et relues depuis le webhook.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    order_number: str = Field(default_factory=lambda: str(uuid4()), alias="orderNumber")
    customer_name: str = Field(default="Unknown", alias="customerName")
    customer_email: str = Field(default="Unknown", alias="customerEmail")
    user_id: Optional[str] = Field(default=None, alias="userId")
    address: Optional[Address] = None

    @field_validator("order_number", "customer_name", "customer_email")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("Champ vide")
        return v


class CheckoutItem(BaseModel):
    id: str
    quantity: int = Field(default=1, ge=1)


class CheckoutRequest(BaseModel):
    items: List[CheckoutItem] = Field(default_factory=list)
    metadata: CheckoutMetadata = Field(default_factory=CheckoutMetadata)
