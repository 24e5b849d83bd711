"""
Admin backoffice endpoints.

Rate table management (CRUD + CSV export), order progression, user
management, and the notification feed. Every route requires an API key
belonging to an admin profile.
"""

import csv
import io
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import StreamingResponse
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.models.notification import AdminNotification
from app.models.order import OrderStatus
from app.models.pricing import PricingRule
from app.models.profile import Profile
from app.repositories.pricing_repo import PricingRepository
from app.repositories.profile_repo import ProfileRepository
from app.schemas.order import OrderRead, OrderStatusUpdate
from app.schemas.pricing import PricingRuleRead, PricingRuleWrite
from app.schemas.profile import (
    AdminFlagUpdate,
    ApiKeyResponse,
    NotificationList,
    NotificationRead,
    ProfileCreate,
    ProfileRead,
)
from app.services import notification_service
from app.services.api_key_service import Principal
from app.services.order_service import OrderService

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin)])

CSV_HEADER = [
    "From Country",
    "To Country",
    "Package Type",
    "USD Base Price",
    "USD Price per KG",
    "NGN Base Price",
    "NGN Price per KG",
]


def _route_conflict(payload: PricingRuleWrite) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=(
            f"A pricing rule for {payload.from_country} → {payload.to_country} "
            f"({payload.package_type}) already exists"
        ),
    )


# ---------------------------------------------------------------------------
# Pricing rules
# ---------------------------------------------------------------------------


@router.get("/pricing", response_model=list[PricingRuleRead])
async def list_pricing_rules(db: AsyncSession = Depends(get_db)):
    """All pricing rules ordered by origin, destination, package type."""
    rules = await PricingRepository(db).list_rules()
    return [PricingRuleRead.model_validate(r) for r in rules]


@router.post("/pricing", response_model=PricingRuleRead, status_code=status.HTTP_201_CREATED)
async def create_pricing_rule(payload: PricingRuleWrite, db: AsyncSession = Depends(get_db)):
    """Create a rule. 409 if the route/package combination is already priced."""
    repo = PricingRepository(db)
    existing = await repo.get_rule(payload.from_country, payload.to_country, payload.package_type)
    if existing is not None:
        raise _route_conflict(payload)

    try:
        rule = await repo.add(PricingRule(**payload.model_dump()))
    except IntegrityError:
        raise _route_conflict(payload)

    logger.info("Pricing rule created: %s (%s)", rule.route, rule.package_type)
    return PricingRuleRead.model_validate(rule)


@router.put("/pricing/{rule_id}", response_model=PricingRuleRead)
async def update_pricing_rule(
    rule_id: UUID,
    payload: PricingRuleWrite,
    db: AsyncSession = Depends(get_db),
):
    """Replace every field of a rule. Takes effect on the next quote."""
    repo = PricingRepository(db)
    rule = await repo.get_by_id(rule_id)
    if rule is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pricing rule not found")

    clash = await repo.get_rule(payload.from_country, payload.to_country, payload.package_type)
    if clash is not None and clash.id != rule.id:
        raise _route_conflict(payload)

    for field, value in payload.model_dump().items():
        setattr(rule, field, value)
    try:
        await db.flush()
    except IntegrityError:
        raise _route_conflict(payload)

    logger.info("Pricing rule %s updated: %s (%s)", rule.id, rule.route, rule.package_type)
    return PricingRuleRead.model_validate(rule)


@router.delete("/pricing/{rule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_pricing_rule(rule_id: UUID, db: AsyncSession = Depends(get_db)):
    repo = PricingRepository(db)
    rule = await repo.get_by_id(rule_id)
    if rule is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pricing rule not found")
    await repo.delete(rule)
    logger.info("Pricing rule %s deleted: %s (%s)", rule_id, rule.route, rule.package_type)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/pricing/export")
async def export_pricing_rules(db: AsyncSession = Depends(get_db)):
    """Download the rate table as CSV."""
    rules = await PricingRepository(db).list_rules()

    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_HEADER)
    for rule in rules:
        writer.writerow([
            rule.from_country,
            rule.to_country,
            rule.package_type,
            rule.base_price if rule.base_price is not None else 0,
            rule.price_per_kg,
            rule.naira_base_price if rule.naira_base_price is not None else "",
            rule.naira_price_per_kg if rule.naira_price_per_kg is not None else "",
        ])

    return StreamingResponse(
        iter([buffer.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="pricing_data.csv"'},
    )


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


@router.get("/orders", response_model=list[OrderRead])
async def list_all_orders(
    order_status: OrderStatus | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
):
    """Every order on the platform, newest first, optionally by status."""
    orders = await OrderService(db).list_all(order_status)
    return [OrderRead.model_validate(o) for o in orders]


@router.patch("/orders/{order_id}/status", response_model=OrderRead)
async def update_order_status(
    order_id: UUID,
    payload: OrderStatusUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Progress an order: pending → approved | rejected, approved → shipped,
    shipped → delivered. 409 for any other move.
    """
    svc = OrderService(db)
    order = await svc.get(order_id)
    if order is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")

    try:
        await svc.update_status(order, payload.status)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))

    return OrderRead.model_validate(order)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


@router.get("/users", response_model=list[ProfileRead])
async def list_users(db: AsyncSession = Depends(get_db)):
    profiles = await ProfileRepository(db).list_profiles()
    return [ProfileRead.model_validate(p) for p in profiles]


@router.post("/users", response_model=ProfileRead, status_code=status.HTTP_201_CREATED)
async def provision_user(payload: ProfileCreate, db: AsyncSession = Depends(get_db)):
    """
    Register a profile for an identity issued by the auth provider.

    A fresh API key is generated. 409 if the user already has a profile.
    """
    result = await db.execute(select(Profile).where(Profile.user_id == payload.user_id))
    if result.scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A profile for this user already exists",
        )

    profile = Profile(**payload.model_dump())
    db.add(profile)
    await db.flush()
    await db.commit()

    logger.info("Profile provisioned for %s", profile.user_id)
    notification_service.notify_new_user(profile.display_name)
    return ProfileRead.model_validate(profile)


@router.patch("/users/{profile_id}/admin", response_model=ProfileRead)
async def set_admin_flag(
    profile_id: UUID,
    payload: AdminFlagUpdate,
    admin: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Grant or revoke admin access. Admins cannot revoke their own access."""
    if profile_id == admin.profile_id and not payload.is_admin:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot revoke your own admin access",
        )

    profile = await ProfileRepository(db).get_by_id(profile_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    profile.is_admin = payload.is_admin
    await db.flush()
    logger.info(
        "Admin access %s for %s by %s",
        "granted" if payload.is_admin else "revoked", profile.user_id, admin.user_id,
    )
    return ProfileRead.model_validate(profile)


@router.post("/users/{profile_id}/api-key", response_model=ApiKeyResponse)
async def regenerate_user_api_key(
    profile_id: UUID,
    admin: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Rotate a user's API key on their behalf."""
    profile = await ProfileRepository(db).get_by_id(profile_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    new_key = profile.regenerate_api_key()
    await db.flush()
    await db.commit()
    logger.info("API key for %s regenerated by %s", profile.user_id, admin.user_id)
    notification_service.notify_api_key_regenerated(profile.display_name)
    return ApiKeyResponse(api_key=new_key)


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


@router.get("/notifications", response_model=NotificationList)
async def list_notifications(
    unread_only: bool = False,
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
):
    query = select(AdminNotification).order_by(AdminNotification.created_at.desc()).limit(limit)
    if unread_only:
        query = query.where(AdminNotification.is_read.is_(False))
    result = await db.execute(query)
    items = [NotificationRead.model_validate(n) for n in result.scalars().all()]

    unread = await db.scalar(
        select(func.count()).select_from(AdminNotification).where(
            AdminNotification.is_read.is_(False)
        )
    )
    return NotificationList(items=items, unread=unread or 0)


@router.patch("/notifications/{notification_id}/read", response_model=NotificationRead)
async def mark_notification_read(notification_id: UUID, db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(AdminNotification).where(AdminNotification.id == notification_id)
    )
    notification = result.scalar_one_or_none()
    if notification is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    notification.is_read = True
    await db.flush()
    return NotificationRead.model_validate(notification)


@router.post("/notifications/read-all")
async def mark_all_notifications_read(db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        update(AdminNotification)
        .where(AdminNotification.is_read.is_(False))
        .values(is_read=True)
    )
    return {"updated": result.rowcount}
