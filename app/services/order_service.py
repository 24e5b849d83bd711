"""
Order service — turn a resolved quote into an order and progress it.

The stored price is always the server's own resolution of the quote;
whatever the client's calculator displayed is not trusted.
"""

import logging
import uuid
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.order import Order, OrderStatus
from app.services import notification_service
from app.services.api_key_service import Principal
from app.services.pricing_service import QuoteResult

logger = logging.getLogger(__name__)

# Largest value numeric(14, 2) holds.
MAX_STORED_COST = Decimal("999999999999.99")


class OrderService:

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_from_quote(
        self,
        principal: Principal,
        quote: QuoteResult,
        from_address: str | None = None,
        to_address: str | None = None,
    ) -> Order:
        """
        Persist a pending order priced by *quote* and notify admins once
        the row is committed.

        Raises ValueError if a cost does not fit the order columns.
        """
        request = quote.request
        naira_cost = quote.ngn.total if quote.ngn else None
        if quote.cost > MAX_STORED_COST or (naira_cost is not None and naira_cost > MAX_STORED_COST):
            raise ValueError("Estimated cost is too large to store")
        order = Order(
            profile_id=principal.profile_id,
            ship_from=request.origin,
            ship_to=request.destination,
            weight=request.weight_kg,
            package_type=request.package_type,
            from_address=from_address,
            to_address=to_address,
            estimated_cost=quote.cost,
            currency=quote.currency.value,
            naira_cost=naira_cost,
            status=OrderStatus.PENDING,
        )
        self.session.add(order)
        await self.session.flush()
        await self.session.commit()

        logger.info(
            "Order %s created by %s: %s %s %s",
            order.id, principal.user_id, quote.route, quote.cost, quote.currency.value,
        )
        notification_service.notify_new_order(order.ship_from, order.ship_to)
        return order

    async def get(self, order_id: uuid.UUID) -> Order | None:
        result = await self.session.execute(select(Order).where(Order.id == order_id))
        return result.scalar_one_or_none()

    async def list_for_profile(self, profile_id: uuid.UUID) -> list[Order]:
        result = await self.session.execute(
            select(Order)
            .where(Order.profile_id == profile_id)
            .order_by(Order.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_all(self, status: OrderStatus | None = None) -> list[Order]:
        query = select(Order).order_by(Order.created_at.desc())
        if status is not None:
            query = query.where(Order.status == status)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def update_status(self, order: Order, new_status: OrderStatus) -> Order:
        """Raises ValueError if the transition is not allowed."""
        previous = order.status
        order.transition_to(new_status)
        await self.session.flush()
        logger.info(
            "Order %s status %s -> %s", order.id, previous.value, new_status.value,
        )
        return order
