"""
Organization Package Service.

Stores per-organization package settings and resolves the effective
settings (tier defaults with the organization's overrides layered on top).
Resolution is recomputed on every call; nothing is cached.
"""

import logging
from datetime import datetime
from typing import List, Optional

from flask import current_app
from sqlalchemy import select

from leasehold import db
from leasehold.exceptions import (
    NoTierConfigured,
    TierNotFound,
    OrganizationNotFound,
    NotificationNotPending,
)
from leasehold.models import (
    Organization,
    PackageTier,
    OrganizationPackageSettings,
    PackageUpgradeNotification,
    NotificationStatus,
)
from leasehold.models.package_tier import PRICING_FIELDS, LIMIT_FIELDS
from leasehold.models.organization import CUSTOM_PRICE_FIELDS, CUSTOM_LIMIT_FIELDS
from leasehold.schemas.package_tier_schema import PackageTierResponseSchema
from leasehold.schemas.package_settings_schema import (
    PackageSettingsUpdateSchema,
    PackageSettingsResponseSchema,
    EffectiveSettingsSchema,
    EffectivePackageSettingsSchema,
)
from leasehold.schemas.upgrade_notification_schema import UpgradeNotificationResponseSchema
from leasehold.services import AuditLogService
from leasehold.services.package_tier_service import PackageTierService

logger = logging.getLogger(__name__)

CUSTOM_COLUMNS = {**CUSTOM_PRICE_FIELDS, **CUSTOM_LIMIT_FIELDS}


def merge_effective_settings(
    tier: PackageTier,
    settings: Optional[OrganizationPackageSettings] = None,
) -> EffectiveSettingsSchema:
    """
    Merge a tier with an organization's overrides.

    Each price and cap is ``custom_X`` when set (including 0), else the
    tier's value. Features are the tier's map updated with the custom map.
    """
    values = {}
    for field in PRICING_FIELDS + LIMIT_FIELDS:
        custom = getattr(settings, CUSTOM_COLUMNS[field]) if settings is not None else None
        values[field] = custom if custom is not None else getattr(tier, field)

    features = dict(tier.features or {})
    if settings is not None and settings.custom_features:
        features.update(settings.custom_features)

    return EffectiveSettingsSchema(**values, features=features)


class OrganizationPackageService:
    """Service for organization package settings and effective-settings resolution."""

    @staticmethod
    def get_organization(organization_id: int, for_update: bool = False) -> Organization:
        """
        Load an organization, optionally locking its row.

        Raises:
            OrganizationNotFound: If the organization does not exist
        """
        query = select(Organization).where(Organization.id == organization_id)
        if for_update:
            query = query.with_for_update()

        organization = db.session.scalar(query)
        if not organization:
            raise OrganizationNotFound(organization_id)
        return organization

    @staticmethod
    def _load_settings(organization_id: int, for_update: bool = False) -> Optional[OrganizationPackageSettings]:
        query = select(OrganizationPackageSettings).where(
            OrganizationPackageSettings.organization_id == organization_id
        )
        if for_update:
            query = query.with_for_update()
        return db.session.scalar(query)

    @staticmethod
    def get_settings(organization_id: int) -> Optional[PackageSettingsResponseSchema]:
        """Stored package settings, or None if the organization has none."""
        OrganizationPackageService.get_organization(organization_id)
        settings = OrganizationPackageService._load_settings(organization_id)
        if settings is None:
            return None
        return PackageSettingsResponseSchema.model_validate(settings)

    @staticmethod
    def set_settings(
        organization_id: int,
        data: PackageSettingsUpdateSchema,
        changed_by: str,
    ) -> PackageSettingsResponseSchema:
        """
        Create or update an organization's package settings.

        Only fields present in ``data`` are applied. Moving to a different
        tier pins ``package_version`` to that tier's current version and
        expires pending upgrade notifications for the old tier.

        Raises:
            OrganizationNotFound: If the organization does not exist
            TierNotFound: If the referenced tier is missing or inactive
            ValueError: If no tier is given when creating settings
        """
        OrganizationPackageService.get_organization(organization_id, for_update=True)
        settings = OrganizationPackageService._load_settings(organization_id, for_update=True)

        updates = data.model_dump(exclude_unset=True)
        tier_id = updates.pop("package_tier_id", None)
        tier_slug = updates.pop("package_tier_slug", None)

        tier = None
        if tier_id is not None:
            tier = db.session.get(PackageTier, tier_id)
            if not tier or not tier.is_active:
                db.session.rollback()
                raise TierNotFound(tier_id, organization_id)
        elif tier_slug is not None:
            tier = PackageTierService.find_active_by_slug(tier_slug)
            if not tier:
                db.session.rollback()
                raise TierNotFound(tier_slug, organization_id)

        action = "UPDATE"
        if settings is None:
            if tier is None:
                db.session.rollback()
                raise ValueError("package_tier_id or package_tier_slug is required to assign a package")
            settings = OrganizationPackageSettings(
                organization_id=organization_id,
                package_tier_id=tier.id,
                package_version=tier.version,
            )
            db.session.add(settings)
            action = "CREATE"
        elif tier is not None and tier.id != settings.package_tier_id:
            OrganizationPackageService._expire_pending_notifications(organization_id, settings.package_tier_id)
            settings.package_tier_id = tier.id
            settings.package_version = tier.version

        for field, value in updates.items():
            # billing_cycle is not nullable
            if field == "billing_cycle" and value is None:
                continue
            setattr(settings, field, value)

        settings.updated_by = changed_by
        settings.refresh_override_flags()
        db.session.commit()

        AuditLogService.log_action(
            action=action,
            entity_type="OrganizationPackageSettings",
            entity_id=settings.id,
            changed_by=changed_by,
            changes=data.model_dump(mode="json", exclude_unset=True),
        )

        logger.info(
            f"{action.title()}d package settings for organization {organization_id} "
            f"(tier {settings.package_tier_id} v{settings.package_version})"
        )
        return PackageSettingsResponseSchema.model_validate(settings)

    @staticmethod
    def resolve_effective_settings(organization_id: int) -> EffectivePackageSettingsSchema:
        """
        Resolve the settings actually enforced for an organization.

        Without a settings row, the configured DEFAULT_PACKAGE_TIER_SLUG is
        used; when that is unset the organization is in an error state.

        Raises:
            OrganizationNotFound: If the organization does not exist
            NoTierConfigured: If there are no settings and no default tier
            TierNotFound: If the referenced (or default) tier is missing or inactive
        """
        OrganizationPackageService.get_organization(organization_id)
        settings = OrganizationPackageService._load_settings(organization_id)

        uses_default_tier = False
        if settings is None:
            default_slug = current_app.config.get("DEFAULT_PACKAGE_TIER_SLUG")
            if not default_slug:
                logger.error(f"Organization {organization_id} has no package tier configured")
                raise NoTierConfigured(organization_id)

            tier = PackageTierService.find_active_by_slug(default_slug)
            if tier is None:
                logger.error(f"Default package tier '{default_slug}' not found or inactive")
                raise TierNotFound(default_slug, organization_id)
            uses_default_tier = True
        else:
            tier = db.session.get(PackageTier, settings.package_tier_id)
            if tier is None or not tier.is_active:
                logger.error(
                    f"Organization {organization_id} references missing or inactive "
                    f"package tier {settings.package_tier_id}"
                )
                raise TierNotFound(settings.package_tier_id, organization_id)

        effective = merge_effective_settings(tier, settings)
        logger.debug(f"Resolved effective settings for organization {organization_id} from tier {tier.tier_slug}")

        return EffectivePackageSettingsSchema(
            organization_id=organization_id,
            tier=PackageTierResponseSchema.model_validate(tier),
            override=PackageSettingsResponseSchema.model_validate(settings) if settings else None,
            effective=effective,
            uses_default_tier=uses_default_tier,
        )

    @staticmethod
    def _expire_pending_notifications(organization_id: int, package_tier_id: int) -> None:
        pending = db.session.scalars(
            select(PackageUpgradeNotification)
            .where(PackageUpgradeNotification.organization_id == organization_id)
            .where(PackageUpgradeNotification.package_tier_id == package_tier_id)
            .where(PackageUpgradeNotification.status == NotificationStatus.PENDING)
        ).all()
        for notification in pending:
            notification.status = NotificationStatus.EXPIRED

    @staticmethod
    def list_upgrade_notifications(
        organization_id: int,
        pending_only: bool = False,
    ) -> List[UpgradeNotificationResponseSchema]:
        """
        List upgrade notifications for an organization, newest first.

        Pending notifications past ``expires_at`` are marked expired on read.
        """
        OrganizationPackageService.get_organization(organization_id)

        notifications = db.session.scalars(
            select(PackageUpgradeNotification)
            .where(PackageUpgradeNotification.organization_id == organization_id)
            .order_by(PackageUpgradeNotification.notified_at.desc(), PackageUpgradeNotification.id.desc())
        ).all()

        now = datetime.utcnow()
        expired = [
            n for n in notifications
            if n.status == NotificationStatus.PENDING and n.is_expired(now)
        ]
        for notification in expired:
            notification.status = NotificationStatus.EXPIRED
        if expired:
            db.session.commit()

        if pending_only:
            notifications = [n for n in notifications if n.status == NotificationStatus.PENDING]

        return [UpgradeNotificationResponseSchema.model_validate(n) for n in notifications]

    @staticmethod
    def respond_to_upgrade_notification(
        notification_id: int,
        accept: bool,
        changed_by: str,
    ) -> UpgradeNotificationResponseSchema:
        """
        Accept or decline a pending upgrade notification.

        Accepting re-pins the organization to the tier's current version and
        clears every override. Declining leaves the settings untouched.

        Raises:
            ValueError: If the notification does not exist
            NotificationNotPending: If it was already answered, superseded or expired
        """
        notification = db.session.scalar(
            select(PackageUpgradeNotification)
            .where(PackageUpgradeNotification.id == notification_id)
            .with_for_update()
        )
        if not notification:
            db.session.rollback()
            raise ValueError(f"Upgrade notification with ID {notification_id} not found")

        if notification.status != NotificationStatus.PENDING:
            db.session.rollback()
            raise NotificationNotPending(notification_id, notification.status.value)

        if notification.is_expired():
            notification.status = NotificationStatus.EXPIRED
            db.session.commit()
            raise NotificationNotPending(notification_id, NotificationStatus.EXPIRED.value)

        now = datetime.utcnow()
        if accept:
            settings = OrganizationPackageService._load_settings(notification.organization_id, for_update=True)
            tier = db.session.get(PackageTier, notification.package_tier_id)
            if settings is None or tier is None or settings.package_tier_id != tier.id:
                notification.status = NotificationStatus.EXPIRED
                db.session.commit()
                raise NotificationNotPending(notification_id, NotificationStatus.EXPIRED.value)

            settings.package_version = tier.version
            settings.clear_overrides()
            settings.updated_by = changed_by
            notification.status = NotificationStatus.ACCEPTED
        else:
            notification.status = NotificationStatus.DECLINED

        notification.responded_at = now
        notification.responded_by = changed_by
        db.session.commit()

        AuditLogService.log_action(
            action="ACCEPT" if accept else "DECLINE",
            entity_type="PackageUpgradeNotification",
            entity_id=notification.id,
            changed_by=changed_by,
            changes={"old_version": notification.old_version, "new_version": notification.new_version},
        )

        logger.info(
            f"Organization {notification.organization_id} "
            f"{'accepted' if accept else 'declined'} package upgrade "
            f"v{notification.old_version}->v{notification.new_version}"
        )
        return UpgradeNotificationResponseSchema.model_validate(notification)
