"""
Add-on Service - purchased capacity on top of the package caps.

Add-ons are evaluated lazily: a cancelled purchase keeps raising its cap
until ``next_billing_date`` passes, checked against the clock at read time.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy import select

from leasehold import db
from leasehold.exceptions import (
    AddonProductNotFound,
    AddonPurchaseNotFound,
    InvalidQuantity,
)
from leasehold.models import (
    UNLIMITED,
    AddonProduct,
    AddonPurchase,
    AddonPurchaseStatus,
    ResourceType,
)
from leasehold.schemas.addon_schema import (
    AddonProductResponseSchema,
    AddonPurchaseResponseSchema,
    AddonPurchaseListResponseSchema,
    LimitBreakdownSchema,
    OrganizationLimitsSchema,
)
from leasehold.services import AuditLogService
from leasehold.services.organization_package_service import OrganizationPackageService

logger = logging.getLogger(__name__)


def next_billing_date(start: datetime) -> datetime:
    """One calendar month after ``start`` (clamped to the month's last day)."""
    return start + relativedelta(months=1)


def apply_addon_bonus(base_cap: int, bonus: int) -> int:
    """Cap including add-ons. An unlimited base stays unlimited."""
    if base_cap >= UNLIMITED:
        return UNLIMITED
    return base_cap + bonus


def _validate_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantity(quantity)
    return quantity


class AddonService:
    """Service for add-on products and purchases."""

    @staticmethod
    def list_products(include_inactive: bool = False) -> List[AddonProductResponseSchema]:
        query = select(AddonProduct).order_by(AddonProduct.addon_type.asc(), AddonProduct.slug.asc())
        if not include_inactive:
            query = query.where(AddonProduct.is_active == True)
        return [AddonProductResponseSchema.model_validate(p) for p in db.session.scalars(query)]

    @staticmethod
    def list_purchases(
        organization_id: int,
        include_inactive: bool = False,
    ) -> AddonPurchaseListResponseSchema:
        """
        List an organization's add-on purchases.

        Cancelled purchases whose billing date has passed are marked expired
        here. Without ``include_inactive`` only purchases still in effect
        are returned.
        """
        OrganizationPackageService.get_organization(organization_id)

        purchases = db.session.scalars(
            select(AddonPurchase)
            .where(AddonPurchase.organization_id == organization_id)
            .order_by(AddonPurchase.purchase_date.desc(), AddonPurchase.id.desc())
        ).all()

        now = datetime.utcnow()
        lapsed = [
            p for p in purchases
            if p.status == AddonPurchaseStatus.CANCELLED and not p.is_in_effect(now)
        ]
        for purchase in lapsed:
            purchase.status = AddonPurchaseStatus.EXPIRED
        if lapsed:
            db.session.commit()
            logger.info(f"Expired {len(lapsed)} lapsed add-on purchase(s) for organization {organization_id}")

        if not include_inactive:
            purchases = [p for p in purchases if p.is_in_effect(now)]

        items = [AddonPurchaseResponseSchema.model_validate(p) for p in purchases]
        return AddonPurchaseListResponseSchema(items=items, total=len(items))

    @staticmethod
    def purchase_addon(
        organization_id: int,
        addon_product_id: int,
        quantity: int,
        changed_by: str,
    ) -> AddonPurchaseResponseSchema:
        """
        Purchase an add-on for an organization.

        Raises:
            InvalidQuantity: If quantity is not a positive integer
            OrganizationNotFound: If the organization does not exist
            AddonProductNotFound: If the product does not exist or is inactive
        """
        quantity = _validate_quantity(quantity)
        OrganizationPackageService.get_organization(organization_id)

        product = db.session.get(AddonProduct, addon_product_id)
        if not product or not product.is_active:
            raise AddonProductNotFound(addon_product_id)

        now = datetime.utcnow()
        purchase = AddonPurchase(
            organization_id=organization_id,
            addon_product_id=product.id,
            quantity=quantity,
            status=AddonPurchaseStatus.ACTIVE,
            purchase_date=now,
            next_billing_date=next_billing_date(now),
            purchased_by=changed_by,
        )
        db.session.add(purchase)
        db.session.commit()

        AuditLogService.log_action(
            action="PURCHASE",
            entity_type="AddonPurchase",
            entity_id=purchase.id,
            changed_by=changed_by,
            changes={"addon": product.slug, "quantity": quantity},
        )

        logger.info(f"Organization {organization_id} purchased {quantity} x {product.slug}")
        return AddonPurchaseResponseSchema.model_validate(purchase)

    @staticmethod
    def _get_purchase_for_update(purchase_id: int) -> AddonPurchase:
        purchase = db.session.scalar(
            select(AddonPurchase).where(AddonPurchase.id == purchase_id).with_for_update()
        )
        if not purchase:
            raise AddonPurchaseNotFound(purchase_id)
        return purchase

    @staticmethod
    def cancel_addon(purchase_id: int, changed_by: str) -> AddonPurchaseResponseSchema:
        """
        Cancel an add-on purchase.

        The cap is not reduced now: the purchase stays in effect until its
        ``next_billing_date``.

        Raises:
            AddonPurchaseNotFound: If the purchase does not exist
            ValueError: If the purchase is not active
        """
        purchase = AddonService._get_purchase_for_update(purchase_id)
        if purchase.status != AddonPurchaseStatus.ACTIVE:
            db.session.rollback()
            raise ValueError(f"Add-on purchase {purchase_id} is {purchase.status.value}, not active")

        purchase.status = AddonPurchaseStatus.CANCELLED
        purchase.cancelled_at = datetime.utcnow()
        db.session.commit()

        AuditLogService.log_action(
            action="CANCEL",
            entity_type="AddonPurchase",
            entity_id=purchase.id,
            changed_by=changed_by,
            changes={"status": ["active", "cancelled"]},
        )

        logger.info(
            f"Cancelled add-on purchase {purchase.id} for organization {purchase.organization_id}, "
            f"in effect until {purchase.next_billing_date}"
        )
        return AddonPurchaseResponseSchema.model_validate(purchase)

    @staticmethod
    def update_quantity(purchase_id: int, quantity: int, changed_by: str) -> AddonPurchaseResponseSchema:
        """
        Change the quantity of an active add-on purchase.

        Raises:
            InvalidQuantity: If quantity is not a positive integer
            AddonPurchaseNotFound: If the purchase does not exist
            ValueError: If the purchase is not active
        """
        quantity = _validate_quantity(quantity)
        purchase = AddonService._get_purchase_for_update(purchase_id)
        if purchase.status != AddonPurchaseStatus.ACTIVE:
            db.session.rollback()
            raise ValueError(f"Add-on purchase {purchase_id} is {purchase.status.value}, not active")

        old_quantity = purchase.quantity
        purchase.quantity = quantity
        db.session.commit()

        AuditLogService.log_action(
            action="UPDATE",
            entity_type="AddonPurchase",
            entity_id=purchase.id,
            changed_by=changed_by,
            changes={"quantity": [old_quantity, quantity]},
        )

        logger.info(f"Add-on purchase {purchase.id} quantity {old_quantity} -> {quantity}")
        return AddonPurchaseResponseSchema.model_validate(purchase)

    @staticmethod
    def get_addon_bonus(organization_id: int, at: Optional[datetime] = None) -> Dict[ResourceType, int]:
        """
        Extra capacity per resource type from add-ons in effect at ``at``.

        Each purchase contributes ``quantity * units_per_addon``. Read only;
        safe to call inside another write transaction.
        """
        at = at or datetime.utcnow()
        bonus = {resource_type: 0 for resource_type in ResourceType}

        purchases = db.session.scalars(
            select(AddonPurchase)
            .where(AddonPurchase.organization_id == organization_id)
            .where(AddonPurchase.status.in_([AddonPurchaseStatus.ACTIVE, AddonPurchaseStatus.CANCELLED]))
        ).all()

        for purchase in purchases:
            if not purchase.is_in_effect(at):
                continue
            product = purchase.addon_product
            bonus[product.addon_type.resource_type] += purchase.quantity * product.units_per_addon

        return bonus

    @staticmethod
    def get_organization_limits(organization_id: int) -> OrganizationLimitsSchema:
        """Base cap, add-on bonus and total per resource type."""
        resolved = OrganizationPackageService.resolve_effective_settings(organization_id)
        bonus = AddonService.get_addon_bonus(organization_id)

        limits = {}
        for resource_type in ResourceType:
            base = resolved.effective.cap_for(resource_type)
            total = apply_addon_bonus(base, bonus[resource_type])
            limits[resource_type.value] = LimitBreakdownSchema(
                base=base,
                addon=bonus[resource_type],
                total=total,
                unlimited=total >= UNLIMITED,
            )

        return OrganizationLimitsSchema(organization_id=organization_id, limits=limits)
