"""Business logic services package."""

import logging
from typing import Optional, Dict, List
from sqlalchemy import select

from leasehold import db
from leasehold.models import AuditLog

logger = logging.getLogger(__name__)


class AuditLogService:
    """Service for audit logging."""

    @staticmethod
    def log_action(
        action: str,
        entity_type: str,
        entity_id: int,
        changed_by: Optional[str],
        changes: Optional[Dict] = None,
    ) -> AuditLog:
        """Log an action.

        Args:
            action: Action type (CREATE, UPDATE, CANCEL, etc.)
            entity_type: Type of entity
            entity_id: Entity ID
            changed_by: Identifier of the actor (format: "super_admin:1", "member:42" or "system")
            changes: Dictionary of changes

        Returns:
            Created audit log
        """
        audit_log = AuditLog(
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            changes=changes,
            changed_by=changed_by or "system",
        )

        db.session.add(audit_log)
        db.session.commit()

        logger.debug(f"Audit log: {action} {entity_type} {entity_id} by {changed_by}")
        return audit_log

    @staticmethod
    def get_logs(
        entity_type: Optional[str] = None,
        entity_id: Optional[int] = None,
        limit: int = 100,
    ) -> List[AuditLog]:
        """Get audit logs, newest first."""
        query = select(AuditLog).order_by(AuditLog.created_at.desc(), AuditLog.id.desc())

        if entity_type:
            query = query.where(AuditLog.entity_type == entity_type)

        if entity_id:
            query = query.where(AuditLog.entity_id == entity_id)

        return list(db.session.scalars(query.limit(limit)))


# Import entitlement services (after AuditLogService is defined)
from leasehold.services.package_tier_service import PackageTierService
from leasehold.services.organization_package_service import OrganizationPackageService
from leasehold.services.usage_service import UsageService
from leasehold.services.addon_service import AddonService
from leasehold.services.limit_service import LimitService
from leasehold.services.feature_gate_service import FeatureGateService
from leasehold.services.portfolio_service import PortfolioService

__all__ = [
    "AuditLogService",
    "PackageTierService",
    "OrganizationPackageService",
    "UsageService",
    "AddonService",
    "LimitService",
    "FeatureGateService",
    "PortfolioService",
]
