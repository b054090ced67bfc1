"""Usage Service - counts the live resources an organization owns."""

import logging
from typing import List

from sqlalchemy import select, func

from leasehold import db
from leasehold.models import Business, Property, Unit, TenantAccess, OrganizationMember
from leasehold.schemas.usage_schema import UsageSnapshotSchema
from leasehold.services.organization_package_service import OrganizationPackageService

logger = logging.getLogger(__name__)


class UsageService:
    """Service for per-organization usage counts."""

    @staticmethod
    def count_usage(organization_id: int) -> UsageSnapshotSchema:
        """
        Count active (non-deleted) resources owned by an organization.

        Walks the ownership chain one hop at a time: businesses, then
        properties of those businesses, then units of those properties, then
        tenant access rows on those units. An empty hop short-circuits the
        rest. Children of soft-deleted parents never count.

        Args:
            organization_id: Organization to count for

        Returns:
            Frozen UsageSnapshotSchema

        Raises:
            OrganizationNotFound: If the organization does not exist
        """
        OrganizationPackageService.get_organization(organization_id)

        business_ids = UsageService._live_ids(
            select(Business.id)
            .where(Business.organization_id == organization_id)
            .where(Business.is_deleted.isnot(True))
        )

        property_ids: List[int] = []
        unit_ids: List[int] = []
        tenants = 0

        if business_ids:
            property_ids = UsageService._live_ids(
                select(Property.id)
                .where(Property.business_id.in_(business_ids))
                .where(Property.is_deleted.isnot(True))
            )

        if property_ids:
            unit_ids = UsageService._live_ids(
                select(Unit.id)
                .where(Unit.property_id.in_(property_ids))
                .where(Unit.is_deleted.isnot(True))
            )

        if unit_ids:
            tenants = db.session.scalar(
                select(func.count(TenantAccess.id))
                .where(TenantAccess.unit_id.in_(unit_ids))
                .where(TenantAccess.is_deleted.isnot(True))
            ) or 0

        users = db.session.scalar(
            select(func.count(OrganizationMember.id))
            .where(OrganizationMember.organization_id == organization_id)
            .where(OrganizationMember.is_active == True)
        ) or 0

        usage = UsageSnapshotSchema(
            businesses=len(business_ids),
            properties=len(property_ids),
            units=len(unit_ids),
            tenants=tenants,
            users=users,
        )
        logger.debug(f"Usage for organization {organization_id}: {usage.model_dump()}")
        return usage

    @staticmethod
    def _live_ids(query) -> List[int]:
        return list(db.session.scalars(query))
