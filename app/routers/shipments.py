# =============================================================================
# app/routers/shipments.py - Shipment Tracking Endpoints
# =============================================================================

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Path
from pydantic import BaseModel, Field

from app.auth import AuthUser, require_roles
from app.dependencies import StorageDep
from core.models import Shipment, ShipmentStatus, UserRole
from core.services import OrderService

router = APIRouter()


class ShipmentUpdateRequest(BaseModel):
    """Body of PUT /api/shipments/{id}; omitted fields are left unchanged."""
    status: ShipmentStatus | None = Field(default=None, examples=["shipped"])
    tracking_number: str | None = Field(default=None, max_length=100, examples=["1Z999AA10123456784"])
    carrier: str | None = Field(default=None, max_length=100, examples=["UPS"])
    estimated_delivery: datetime | None = None


@router.put("/{shipment_id}", response_model=Shipment)
def update_shipment(
    shipment_id: Annotated[int, Path(description="Shipment id")],
    request: ShipmentUpdateRequest,
    storage: StorageDep,
    user: AuthUser = Depends(require_roles(UserRole.ADMIN, UserRole.SELLER)),
):
    """
    Update a shipment (admin, or a seller with products in the order).

    Moving the shipment to shipped or delivered moves the order too.
    """
    return OrderService(storage).update_shipment(
        user, shipment_id, request.model_dump(exclude_unset=True)
    )
