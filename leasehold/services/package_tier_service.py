"""Package Tier Service - catalog administration with version history."""

import logging
from datetime import datetime, timedelta
from typing import List, Dict, Optional

from flask import current_app
from sqlalchemy import select, func

from leasehold import db
from leasehold.exceptions import StaleTierVersion, TierNotFound
from leasehold.models import (
    PackageTier,
    PackageTierVersion,
    OrganizationPackageSettings,
    PackageUpgradeNotification,
    NotificationStatus,
)
from leasehold.models.package_tier import VERSIONED_FIELDS, PRICING_FIELDS, LIMIT_FIELDS
from leasehold.schemas.package_tier_schema import (
    PackageTierCreateSchema,
    PackageTierUpdateSchema,
    PackageTierResponseSchema,
    PackageTierListResponseSchema,
    PackageTierVersionResponseSchema,
)
from leasehold.services import AuditLogService

logger = logging.getLogger(__name__)


class PackageTierService:
    """Service for package tier operations."""

    @staticmethod
    def list_tiers(include_inactive: bool = False) -> PackageTierListResponseSchema:
        """
        List package tiers in display order.

        Args:
            include_inactive: Whether to include deactivated tiers

        Returns:
            PackageTierListResponseSchema
        """
        query = select(PackageTier)
        if not include_inactive:
            query = query.where(PackageTier.is_active == True)

        query = query.order_by(PackageTier.display_order.asc(), PackageTier.monthly_price_cents.asc())
        tiers = [PackageTierResponseSchema.model_validate(t) for t in db.session.scalars(query)]

        return PackageTierListResponseSchema(items=tiers, total=len(tiers))

    @staticmethod
    def get_tier(tier_id: int) -> PackageTierResponseSchema:
        """
        Get a package tier by ID.

        Raises:
            ValueError: If tier not found
        """
        tier = db.session.get(PackageTier, tier_id)
        if not tier:
            raise ValueError(f"Package tier with ID {tier_id} not found")

        return PackageTierResponseSchema.model_validate(tier)

    @staticmethod
    def get_tier_by_slug(slug: str) -> PackageTierResponseSchema:
        """
        Get an active package tier by slug.

        Raises:
            TierNotFound: If no active tier has this slug
        """
        tier = PackageTierService.find_active_by_slug(slug)
        if not tier:
            raise TierNotFound(slug)

        return PackageTierResponseSchema.model_validate(tier)

    @staticmethod
    def find_active_by_slug(slug: str) -> Optional[PackageTier]:
        return db.session.scalar(
            select(PackageTier)
            .where(PackageTier.tier_slug == slug)
            .where(PackageTier.is_active == True)
        )

    @staticmethod
    def create_tier(data: PackageTierCreateSchema, changed_by: str) -> PackageTierResponseSchema:
        """
        Create a package tier and its version 1 snapshot.

        Raises:
            ValueError: If the tier name or slug is already taken
        """
        existing = db.session.scalar(
            select(PackageTier).where(
                (PackageTier.tier_slug == data.tier_slug) | (PackageTier.tier_name == data.tier_name)
            )
        )
        if existing:
            raise ValueError(f"Package tier '{data.tier_slug}' already exists")

        tier = PackageTier(**data.model_dump(), version=1)
        db.session.add(tier)
        db.session.flush()

        db.session.add(PackageTierVersion.from_tier(tier, change_notes="Initial version", created_by=changed_by))
        db.session.commit()

        AuditLogService.log_action(
            action="CREATE",
            entity_type="PackageTier",
            entity_id=tier.id,
            changed_by=changed_by,
            changes={"tier_slug": tier.tier_slug, "version": tier.version},
        )

        logger.info(f"Created package tier {tier.tier_slug} (ID {tier.id})")
        return PackageTierResponseSchema.model_validate(tier)

    @staticmethod
    def update_tier(
        tier_id: int,
        data: PackageTierUpdateSchema,
        changed_by: str,
        expected_version: Optional[int] = None,
    ) -> PackageTierResponseSchema:
        """
        Update a package tier.

        The tier row is locked for the duration of the edit. When a price,
        cap or feature changes the version is incremented, the new state is
        snapshotted, and every organization pinned to an older version gets
        a pending upgrade notification.

        Args:
            tier_id: Tier to edit
            data: Fields to change (unset fields are left alone)
            changed_by: Actor identifier for the audit log
            expected_version: Version the caller based the edit on; falls back
                to ``data.expected_version``

        Raises:
            ValueError: If tier not found
            StaleTierVersion: If the tier moved past ``expected_version``
        """
        tier = db.session.scalar(
            select(PackageTier).where(PackageTier.id == tier_id).with_for_update()
        )
        if not tier:
            raise ValueError(f"Package tier with ID {tier_id} not found")

        if expected_version is None:
            expected_version = data.expected_version
        if expected_version is not None and expected_version != tier.version:
            db.session.rollback()
            raise StaleTierVersion(tier_id, expected_version, tier.version)

        updates = data.model_dump(exclude_unset=True, exclude_none=True, exclude={"expected_version", "change_notes"})

        changes = {}
        for field, value in updates.items():
            old_value = getattr(tier, field)
            if old_value != value:
                changes[field] = [old_value, value]
                setattr(tier, field, value)

        if not changes:
            db.session.rollback()
            return PackageTierResponseSchema.model_validate(tier)

        versioned_changes = {f: c for f, c in changes.items() if f in VERSIONED_FIELDS}
        notified = 0
        if versioned_changes:
            tier.version = tier.version + 1
            db.session.add(
                PackageTierVersion.from_tier(tier, change_notes=data.change_notes, created_by=changed_by)
            )
            notified = PackageTierService._notify_pinned_organizations(tier, versioned_changes)

        db.session.commit()

        AuditLogService.log_action(
            action="UPDATE",
            entity_type="PackageTier",
            entity_id=tier.id,
            changed_by=changed_by,
            changes=changes,
        )

        logger.info(
            f"Updated package tier {tier.tier_slug} to v{tier.version}: "
            f"{sorted(changes)} ({notified} organizations notified)"
        )
        return PackageTierResponseSchema.model_validate(tier)

    @staticmethod
    def _notify_pinned_organizations(tier: PackageTier, versioned_changes: Dict) -> int:
        """Create pending upgrade notifications inside the caller's transaction."""
        expiry_days = current_app.config.get("UPGRADE_NOTIFICATION_EXPIRY_DAYS", 30)
        now = datetime.utcnow()

        pinned = db.session.scalars(
            select(OrganizationPackageSettings)
            .where(OrganizationPackageSettings.package_tier_id == tier.id)
            .where(OrganizationPackageSettings.package_version < tier.version)
        ).all()

        for settings in pinned:
            # Only the newest offer stays open
            superseded = db.session.scalars(
                select(PackageUpgradeNotification)
                .where(PackageUpgradeNotification.organization_id == settings.organization_id)
                .where(PackageUpgradeNotification.package_tier_id == tier.id)
                .where(PackageUpgradeNotification.status == NotificationStatus.PENDING)
            ).all()
            for notification in superseded:
                notification.status = NotificationStatus.EXPIRED

            db.session.add(PackageUpgradeNotification(
                organization_id=settings.organization_id,
                package_tier_id=tier.id,
                old_version=settings.package_version,
                new_version=tier.version,
                changes_summary=versioned_changes,
                pricing_changed=any(f in versioned_changes for f in PRICING_FIELDS),
                limits_changed=any(f in versioned_changes for f in LIMIT_FIELDS),
                features_changed="features" in versioned_changes,
                status=NotificationStatus.PENDING,
                notified_at=now,
                expires_at=now + timedelta(days=expiry_days),
            ))

        return len(pinned)

    @staticmethod
    def deactivate_tier(tier_id: int, changed_by: str) -> PackageTierResponseSchema:
        """
        Deactivate a package tier (soft flag, never deleted).

        Raises:
            ValueError: If tier not found or organizations are still assigned to it
        """
        tier = db.session.scalar(
            select(PackageTier).where(PackageTier.id == tier_id).with_for_update()
        )
        if not tier:
            raise ValueError(f"Package tier with ID {tier_id} not found")

        subscribers = db.session.scalar(
            select(func.count(OrganizationPackageSettings.id))
            .where(OrganizationPackageSettings.package_tier_id == tier_id)
        )
        if subscribers:
            db.session.rollback()
            raise ValueError(
                f"Package tier {tier.tier_slug} still has {subscribers} organization(s) assigned"
            )

        tier.is_active = False
        db.session.commit()

        AuditLogService.log_action(
            action="DEACTIVATE",
            entity_type="PackageTier",
            entity_id=tier.id,
            changed_by=changed_by,
            changes={"is_active": [True, False]},
        )

        logger.info(f"Deactivated package tier {tier.tier_slug}")
        return PackageTierResponseSchema.model_validate(tier)

    @staticmethod
    def list_versions(tier_id: int) -> List[PackageTierVersionResponseSchema]:
        """Version history of a tier, newest first."""
        tier = db.session.get(PackageTier, tier_id)
        if not tier:
            raise ValueError(f"Package tier with ID {tier_id} not found")

        versions = db.session.scalars(
            select(PackageTierVersion)
            .where(PackageTierVersion.package_tier_id == tier_id)
            .order_by(PackageTierVersion.version.desc())
        )
        return [PackageTierVersionResponseSchema.model_validate(v) for v in versions]
