"""Unit tests for PortfolioService (limit-guarded creation)."""

import pytest
from sqlalchemy import select, func

from leasehold.exceptions import LimitReached, NoTierConfigured, OrganizationNotFound
from leasehold.models import AuditLog, Business, Property, Unit, TenantAccess, ResourceType, MemberRole
from leasehold.schemas import (
    BusinessCreateSchema,
    PropertyCreateSchema,
    UnitCreateSchema,
    TenantAccessCreateSchema,
    MemberCreateSchema,
)
from leasehold.services import PortfolioService, UsageService


def count(db, model):
    return db.session.scalar(select(func.count(model.id)))


@pytest.mark.unit
class TestGuardedCreate:

    def test_create_business(self, db, subscribed_organization):
        business = PortfolioService.create_business(
            subscribed_organization.id, BusinessCreateSchema(name="Maple Holdings"), "member:1"
        )

        assert business.id is not None
        assert business.organization_id == subscribed_organization.id
        assert UsageService.count_usage(subscribed_organization.id).businesses == 1

    def test_business_cap_blocks_second_business(self, db, subscribed_organization):
        PortfolioService.create_business(subscribed_organization.id, BusinessCreateSchema(name="One"), "member:1")

        with pytest.raises(LimitReached) as exc_info:
            PortfolioService.create_business(subscribed_organization.id, BusinessCreateSchema(name="Two"), "member:1")

        assert exc_info.value.resource_type == ResourceType.BUSINESS
        assert count(db, Business) == 1

    def test_property_cap_blocks_insert(self, db, portfolio_factory, subscribed_organization):
        created = portfolio_factory(subscribed_organization, businesses=1, properties=3)
        business_id = created["businesses"][0].id

        with pytest.raises(LimitReached):
            PortfolioService.create_property(
                subscribed_organization.id, business_id, PropertyCreateSchema(name="Fourth"), "member:1"
            )

        assert count(db, Property) == 3

    def test_deleting_frees_capacity(self, db, portfolio_factory, subscribed_organization):
        created = portfolio_factory(subscribed_organization, businesses=1, properties=3)
        business_id = created["businesses"][0].id

        PortfolioService.soft_delete(
            subscribed_organization.id, ResourceType.PROPERTY, created["properties"][0].id, "member:1"
        )
        prop = PortfolioService.create_property(
            subscribed_organization.id, business_id, PropertyCreateSchema(name="Replacement"), "member:1"
        )

        assert prop.id is not None
        assert UsageService.count_usage(subscribed_organization.id).properties == 3

    def test_create_unit_and_tenant_access(self, db, portfolio_factory, subscribed_organization):
        created = portfolio_factory(subscribed_organization, businesses=1, properties=1)

        unit = PortfolioService.create_unit(
            subscribed_organization.id, created["properties"][0].id, UnitCreateSchema(unit_number="1A"), "member:1"
        )
        access = PortfolioService.grant_tenant_access(
            subscribed_organization.id,
            unit.id,
            TenantAccessCreateSchema(tenant_name="Jordan Lee", tenant_email="jordan@example.com"),
            "member:1",
        )

        usage = UsageService.count_usage(subscribed_organization.id)
        assert usage.units == 1
        assert usage.tenants == 1
        assert access.unit_id == unit.id

    def test_parent_of_other_organization_is_not_found(
        self, db, portfolio_factory, subscribed_organization, other_organization
    ):
        created = portfolio_factory(other_organization, businesses=1)

        with pytest.raises(ValueError, match="not found"):
            PortfolioService.create_property(
                subscribed_organization.id,
                created["businesses"][0].id,
                PropertyCreateSchema(name="Sneaky"),
                "member:1",
            )

    def test_deleted_parent_is_not_found(self, db, portfolio_factory, subscribed_organization):
        created = portfolio_factory(subscribed_organization, businesses=1)
        created["businesses"][0].is_deleted = True
        db.session.commit()

        with pytest.raises(ValueError, match="not found"):
            PortfolioService.create_property(
                subscribed_organization.id,
                created["businesses"][0].id,
                PropertyCreateSchema(name="Orphan"),
                "member:1",
            )

    def test_unit_under_deleted_business_is_not_found(self, db, portfolio_factory, subscribed_organization):
        created = portfolio_factory(subscribed_organization, businesses=1, properties=1)
        PortfolioService.soft_delete(
            subscribed_organization.id, ResourceType.BUSINESS, created["businesses"][0].id, "member:1"
        )

        for i in range(12):
            with pytest.raises(ValueError, match="not found"):
                PortfolioService.create_unit(
                    subscribed_organization.id,
                    created["properties"][0].id,
                    UnitCreateSchema(unit_number=f"{i}B"),
                    "member:1",
                )

        assert count(db, Unit) == 0

    def test_tenant_access_under_deleted_business_is_not_found(
        self, db, portfolio_factory, subscribed_organization
    ):
        created = portfolio_factory(subscribed_organization, businesses=1, properties=1, units=1)
        created["businesses"][0].is_deleted = True
        db.session.commit()

        with pytest.raises(ValueError, match="not found"):
            PortfolioService.grant_tenant_access(
                subscribed_organization.id,
                created["units"][0].id,
                TenantAccessCreateSchema(tenant_name="Jordan Lee", tenant_email="jordan@example.com"),
                "member:1",
            )

        assert count(db, TenantAccess) == 0

    def test_tenant_access_under_deleted_property_is_not_found(
        self, db, portfolio_factory, subscribed_organization
    ):
        created = portfolio_factory(subscribed_organization, businesses=1, properties=1, units=1)
        created["properties"][0].is_deleted = True
        db.session.commit()

        with pytest.raises(ValueError, match="not found"):
            PortfolioService.grant_tenant_access(
                subscribed_organization.id,
                created["units"][0].id,
                TenantAccessCreateSchema(tenant_name="Jordan Lee", tenant_email="jordan@example.com"),
                "member:1",
            )

    def test_unresolvable_settings_block_creation(self, db, sample_organization):
        with pytest.raises(NoTierConfigured):
            PortfolioService.create_business(sample_organization.id, BusinessCreateSchema(name="Nope"), "member:1")

        assert count(db, Business) == 0

    def test_unknown_organization(self, db):
        with pytest.raises(OrganizationNotFound):
            PortfolioService.create_business(9999, BusinessCreateSchema(name="Ghost"), "member:1")

    def test_create_is_audited(self, db, subscribed_organization):
        business = PortfolioService.create_business(
            subscribed_organization.id, BusinessCreateSchema(name="Audited"), "member:9"
        )

        log = db.session.scalar(select(AuditLog).where(AuditLog.entity_type == "Business"))
        assert log.entity_id == business.id
        assert log.changed_by == "member:9"


@pytest.mark.unit
class TestMembers:

    def test_user_cap_counts_active_members(self, db, sample_member, subscribed_organization):
        with pytest.raises(LimitReached) as exc_info:
            PortfolioService.add_member(
                subscribed_organization.id, MemberCreateSchema(email="second@example.com"), "member:1"
            )

        assert exc_info.value.resource_type == ResourceType.USER

    def test_deactivated_member_frees_seat(self, db, sample_member, subscribed_organization):
        PortfolioService.soft_delete(subscribed_organization.id, ResourceType.USER, sample_member.id, "member:1")

        member = PortfolioService.add_member(
            subscribed_organization.id,
            MemberCreateSchema(email="second@example.com", role=MemberRole.ADMIN),
            "member:1",
        )

        assert member.is_active is True
        assert member.role == MemberRole.ADMIN

    def test_duplicate_email_rejected(self, db, settings_factory, sample_member, sample_organization, sample_tier):
        settings_factory(sample_organization, sample_tier, custom_max_users=5)

        with pytest.raises(ValueError, match="already a member"):
            PortfolioService.add_member(
                sample_organization.id, MemberCreateSchema(email=sample_member.email), "member:1"
            )

    def test_deleting_twice_is_not_found(self, db, sample_member, subscribed_organization):
        PortfolioService.soft_delete(subscribed_organization.id, ResourceType.USER, sample_member.id, "member:1")

        with pytest.raises(ValueError, match="not found"):
            PortfolioService.soft_delete(subscribed_organization.id, ResourceType.USER, sample_member.id, "member:1")
