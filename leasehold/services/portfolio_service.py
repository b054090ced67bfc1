"""
Portfolio Service - limit-guarded creation of countable resources.

Every create locks the owning organization's row, re-runs the limit check
inside that transaction and only then inserts. Concurrent creators for the
same organization are serialized on the lock, so two sessions cannot both
pass the check and exceed the cap.
"""

import logging
from typing import Callable

from sqlalchemy import select

from leasehold import db
from leasehold.models import (
    ResourceType,
    Business,
    Property,
    Unit,
    TenantAccess,
    OrganizationMember,
)
from leasehold.schemas.portfolio_schema import (
    BusinessCreateSchema,
    PropertyCreateSchema,
    UnitCreateSchema,
    TenantAccessCreateSchema,
    MemberCreateSchema,
)
from leasehold.services import AuditLogService
from leasehold.services.limit_service import LimitService
from leasehold.services.organization_package_service import OrganizationPackageService

logger = logging.getLogger(__name__)

RESOURCE_MODELS = {
    ResourceType.BUSINESS: Business,
    ResourceType.PROPERTY: Property,
    ResourceType.UNIT: Unit,
    ResourceType.TENANT: TenantAccess,
    ResourceType.USER: OrganizationMember,
}


def owning_organization_id(resource) -> int:
    """Walk up the ownership chain to the organization id."""
    if isinstance(resource, (Business, OrganizationMember)):
        return resource.organization_id
    if isinstance(resource, Property):
        return resource.business.organization_id
    if isinstance(resource, Unit):
        return resource.property.business.organization_id
    if isinstance(resource, TenantAccess):
        return resource.unit.property.business.organization_id
    raise TypeError(f"Unsupported resource {resource!r}")


def ownership_chain(resource) -> list:
    """The resource followed by each ancestor up to its business."""
    chain = [resource]
    while True:
        if isinstance(resource, TenantAccess):
            resource = resource.unit
        elif isinstance(resource, Unit):
            resource = resource.property
        elif isinstance(resource, Property):
            resource = resource.business
        else:
            return chain
        chain.append(resource)


class PortfolioService:
    """Service for creating and removing businesses, properties, units, tenants and members."""

    @staticmethod
    def _get_live(model, resource_id: int, organization_id: int):
        """
        Load a resource owned by the organization whose whole ownership chain is live.

        Rows under a soft-deleted ancestor do not count as usage, so they
        must not accept children either.

        Raises:
            ValueError: If missing, soft-deleted (itself or any ancestor) or
                owned by another organization
        """
        resource = db.session.get(model, resource_id)
        if (
            resource is None
            or any(getattr(node, "is_deleted", False) for node in ownership_chain(resource))
            or owning_organization_id(resource) != organization_id
        ):
            raise ValueError(f"{model.__name__} with ID {resource_id} not found")
        return resource

    @staticmethod
    def _guarded_create(
        organization_id: int,
        resource_type: ResourceType,
        build: Callable[[], object],
        changed_by: str,
    ):
        """Lock the organization, re-check the cap, then insert in one transaction."""
        try:
            OrganizationPackageService.get_organization(organization_id, for_update=True)
            resource = build()
            LimitService.assert_can_add(organization_id, resource_type)
        except ValueError:
            # Includes EntitlementError (LimitReached, NoTierConfigured, ...)
            db.session.rollback()
            raise

        db.session.add(resource)
        db.session.commit()

        AuditLogService.log_action(
            action="CREATE",
            entity_type=resource.__class__.__name__,
            entity_id=resource.id,
            changed_by=changed_by,
            changes={"organization_id": organization_id},
        )

        logger.info(f"Created {resource_type.value} {resource.id} for organization {organization_id}")
        return resource

    @staticmethod
    def create_business(organization_id: int, data: BusinessCreateSchema, changed_by: str) -> Business:
        """
        Create a business.

        Raises:
            OrganizationNotFound: If the organization does not exist
            LimitReached: If the organization is at its business cap
        """
        return PortfolioService._guarded_create(
            organization_id,
            ResourceType.BUSINESS,
            lambda: Business(organization_id=organization_id, name=data.name, is_deleted=False),
            changed_by,
        )

    @staticmethod
    def create_property(
        organization_id: int,
        business_id: int,
        data: PropertyCreateSchema,
        changed_by: str,
    ) -> Property:
        """
        Create a property under one of the organization's businesses.

        Raises:
            ValueError: If the business is not the organization's
            LimitReached: If the organization is at its property cap
        """
        def build():
            business = PortfolioService._get_live(Business, business_id, organization_id)
            return Property(business_id=business.id, name=data.name, address=data.address, is_deleted=False)

        return PortfolioService._guarded_create(organization_id, ResourceType.PROPERTY, build, changed_by)

    @staticmethod
    def create_unit(
        organization_id: int,
        property_id: int,
        data: UnitCreateSchema,
        changed_by: str,
    ) -> Unit:
        def build():
            prop = PortfolioService._get_live(Property, property_id, organization_id)
            return Unit(property_id=prop.id, unit_number=data.unit_number, is_deleted=False)

        return PortfolioService._guarded_create(organization_id, ResourceType.UNIT, build, changed_by)

    @staticmethod
    def grant_tenant_access(
        organization_id: int,
        unit_id: int,
        data: TenantAccessCreateSchema,
        changed_by: str,
    ) -> TenantAccess:
        def build():
            unit = PortfolioService._get_live(Unit, unit_id, organization_id)
            return TenantAccess(
                unit_id=unit.id,
                tenant_name=data.tenant_name,
                tenant_email=data.tenant_email,
                is_deleted=False,
            )

        return PortfolioService._guarded_create(organization_id, ResourceType.TENANT, build, changed_by)

    @staticmethod
    def add_member(organization_id: int, data: MemberCreateSchema, changed_by: str) -> OrganizationMember:
        """
        Add an active member (a user seat) to the organization.

        Raises:
            ValueError: If the email is already a member
            LimitReached: If the organization is at its user cap
        """
        def build():
            existing = db.session.scalar(
                select(OrganizationMember)
                .where(OrganizationMember.organization_id == organization_id)
                .where(OrganizationMember.email == data.email)
            )
            if existing is not None:
                raise ValueError(f"{data.email} is already a member of organization {organization_id}")
            return OrganizationMember(
                organization_id=organization_id,
                email=data.email,
                role=data.role,
                is_active=True,
            )

        return PortfolioService._guarded_create(organization_id, ResourceType.USER, build, changed_by)

    @staticmethod
    def soft_delete(
        organization_id: int,
        resource_type: ResourceType,
        resource_id: int,
        changed_by: str,
    ) -> None:
        """
        Soft-delete a resource (members are deactivated instead).

        Soft-deleted rows and their descendants stop counting against limits.

        Raises:
            ValueError: If the resource is not the organization's or already deleted
        """
        model = RESOURCE_MODELS[resource_type]
        resource = PortfolioService._get_live(model, resource_id, organization_id)

        if isinstance(resource, OrganizationMember):
            if not resource.is_active:
                raise ValueError(f"OrganizationMember with ID {resource_id} not found")
            resource.is_active = False
        else:
            resource.is_deleted = True
        db.session.commit()

        AuditLogService.log_action(
            action="DELETE",
            entity_type=model.__name__,
            entity_id=resource_id,
            changed_by=changed_by,
            changes={"organization_id": organization_id},
        )

        logger.info(f"Soft-deleted {resource_type.value} {resource_id} of organization {organization_id}")
