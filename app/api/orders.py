"""
Order endpoints for the user dashboard — submit, list, and view orders.

Create flow:
  1. Authenticate the API key
  2. Re-price the shipment with the rate resolver
  3. Store the order as ``pending`` with the resolved price
  4. Notify admins (background task)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_principal, get_rate_resolver
from app.api.quotes import to_quote_request
from app.core.exceptions import internal_errors
from app.database import get_db
from app.schemas.order import OrderCreate, OrderRead
from app.services.api_key_service import Principal
from app.services.order_service import OrderService
from app.services.pricing_service import RateResolver

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=OrderRead, status_code=status.HTTP_201_CREATED)
async def create_order(
    payload: OrderCreate,
    principal: Principal = Depends(get_current_principal),
    resolver: RateResolver = Depends(get_rate_resolver),
    db: AsyncSession = Depends(get_db),
):
    """
    Submit a shipment order.

    The cost is recomputed from the current rate table; 404 if the route
    has no pricing rule, 422 if the cost is too large to store.
    """
    with internal_errors("Order pricing"):
        quote = await resolver.resolve(to_quote_request(payload))
    try:
        order = await OrderService(db).create_from_quote(
            principal, quote,
            from_address=payload.from_address,
            to_address=payload.to_address,
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        )
    return OrderRead.model_validate(order)


@router.get("", response_model=list[OrderRead])
async def list_my_orders(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """The caller's orders, newest first."""
    orders = await OrderService(db).list_for_profile(principal.profile_id)
    return [OrderRead.model_validate(o) for o in orders]


@router.get("/{order_id}", response_model=OrderRead)
async def get_my_order(
    order_id: UUID,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    order = await OrderService(db).get(order_id)
    if order is None or order.profile_id != principal.profile_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found",
        )
    return OrderRead.model_validate(order)
