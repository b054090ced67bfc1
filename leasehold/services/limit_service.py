"""
Limit Service - compares usage against effective caps.

Two different questions use two different operators:

* ``check_limits``: is the organization over its caps? Violation iff
  ``usage > cap``; sitting exactly at the cap is compliant.
* ``can_add``: may the organization create one more? Allowed iff
  ``usage < cap`` (so refused once ``usage >= cap``).
"""

import logging
from typing import Tuple

from leasehold.exceptions import LimitReached
from leasehold.models import UNLIMITED, ResourceType
from leasehold.schemas.package_settings_schema import EffectiveSettingsSchema
from leasehold.schemas.usage_schema import (
    UsageSnapshotSchema,
    LimitViolationSchema,
    LimitCheckSchema,
    CanAddResponseSchema,
    ResourceLimitStatusSchema,
    LimitStatusSchema,
)
from leasehold.services.addon_service import AddonService, apply_addon_bonus
from leasehold.services.organization_package_service import OrganizationPackageService
from leasehold.services.usage_service import UsageService

logger = logging.getLogger(__name__)


def usage_percentage(current: int, cap: int) -> float:
    """Share of the cap in use. Unlimited caps report 0."""
    if cap >= UNLIMITED:
        return 0.0
    if cap <= 0:
        return 100.0 if current > 0 else 0.0
    return round(current / cap * 100, 1)


class LimitService:
    """Service for limit checks and pre-flight creation checks."""

    @staticmethod
    def check_limits(effective: EffectiveSettingsSchema, usage: UsageSnapshotSchema) -> LimitCheckSchema:
        """
        Compare usage against effective caps. Pure; performs no I/O.

        Returns:
            LimitCheckSchema with display strings (``"Properties: 5/3"``) and
            the matching ``{resource_type, current, max}`` details
        """
        details = []
        for resource_type in ResourceType:
            current = usage.count_for(resource_type)
            cap = effective.cap_for(resource_type)
            if current > cap:
                details.append(LimitViolationSchema(resource_type=resource_type, current=current, max=cap))

        return LimitCheckSchema(
            within_limits=not details,
            violations=[violation.display() for violation in details],
            details=details,
        )

    @staticmethod
    def check_package_limits(organization_id: int) -> LimitCheckSchema:
        """Check an organization's usage against its caps including add-ons."""
        resolved = OrganizationPackageService.resolve_effective_settings(organization_id)
        usage = UsageService.count_usage(organization_id)
        bonus = AddonService.get_addon_bonus(organization_id)

        raised_caps = {
            resource_type.cap_field: apply_addon_bonus(
                resolved.effective.cap_for(resource_type), bonus[resource_type]
            )
            for resource_type in ResourceType
        }
        effective = resolved.effective.model_copy(update=raised_caps)

        result = LimitService.check_limits(effective, usage)
        if not result.within_limits:
            logger.warning(f"Organization {organization_id} exceeds limits: {result.violations}")
        return result

    @staticmethod
    def get_effective_cap(organization_id: int, resource_type: ResourceType) -> int:
        """Tier/override cap for one resource plus add-ons in effect."""
        resolved = OrganizationPackageService.resolve_effective_settings(organization_id)
        bonus = AddonService.get_addon_bonus(organization_id)
        return apply_addon_bonus(resolved.effective.cap_for(resource_type), bonus[resource_type])

    @staticmethod
    def _evaluate(organization_id: int, resource_type: ResourceType) -> Tuple[int, int]:
        """(current usage, effective cap) for one resource type."""
        cap = LimitService.get_effective_cap(organization_id, resource_type)
        current = UsageService.count_usage(organization_id).count_for(resource_type)
        return current, cap

    @staticmethod
    def can_add(organization_id: int, resource_type: ResourceType) -> bool:
        """
        Whether the organization may create one more ``resource_type``.

        Raises:
            NoTierConfigured / TierNotFound: If settings cannot be resolved
        """
        return LimitService.check_can_add(organization_id, resource_type).can_add

    @staticmethod
    def check_can_add(organization_id: int, resource_type: ResourceType) -> CanAddResponseSchema:
        """``can_add`` with the numbers behind the decision."""
        current, cap = LimitService._evaluate(organization_id, resource_type)
        unlimited = cap >= UNLIMITED
        return CanAddResponseSchema(
            organization_id=organization_id,
            resource_type=resource_type,
            can_add=unlimited or current < cap,
            current=current,
            max=cap,
            unlimited=unlimited,
        )

    @staticmethod
    def assert_can_add(organization_id: int, resource_type: ResourceType) -> None:
        """
        Raise unless the organization may create one more ``resource_type``.

        Raises:
            LimitReached: If the organization is at (or over) its cap
        """
        current, cap = LimitService._evaluate(organization_id, resource_type)
        if cap >= UNLIMITED or current < cap:
            return

        logger.warning(
            f"Limit reached for organization {organization_id}: "
            f"{resource_type.value} {current}/{cap}"
        )
        raise LimitReached(resource_type, current, cap)

    @staticmethod
    def get_limit_status(organization_id: int) -> LimitStatusSchema:
        """Per-resource usage, caps and percentage for dashboards."""
        resolved = OrganizationPackageService.resolve_effective_settings(organization_id)
        usage = UsageService.count_usage(organization_id)
        bonus = AddonService.get_addon_bonus(organization_id)

        resources = []
        for resource_type in ResourceType:
            base = resolved.effective.cap_for(resource_type)
            cap = apply_addon_bonus(base, bonus[resource_type])
            current = usage.count_for(resource_type)
            unlimited = cap >= UNLIMITED
            resources.append(ResourceLimitStatusSchema(
                resource_type=resource_type,
                current=current,
                base_max=base,
                addon_bonus=bonus[resource_type],
                max=cap,
                unlimited=unlimited,
                percentage=usage_percentage(current, cap),
                at_limit=not unlimited and current >= cap,
            ))

        return LimitStatusSchema(organization_id=organization_id, resources=resources)
