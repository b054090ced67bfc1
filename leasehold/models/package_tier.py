"""Package tier catalog models."""

from sqlalchemy import Enum as SQLEnum
from leasehold import db
from leasehold.models import BaseModel
from leasehold.models.enums import PackageType


# Fields whose change bumps the tier version and is snapshotted
VERSIONED_FIELDS = (
    "monthly_price_cents",
    "annual_price_cents",
    "max_businesses",
    "max_properties",
    "max_units",
    "max_tenants",
    "max_users",
    "max_payment_methods",
    "features",
)

PRICING_FIELDS = ("monthly_price_cents", "annual_price_cents")

LIMIT_FIELDS = (
    "max_businesses",
    "max_properties",
    "max_units",
    "max_tenants",
    "max_users",
    "max_payment_methods",
)


class PackageTier(BaseModel):
    """
    Package Tier model.

    Named subscription tier with pricing (minor currency units), resource
    caps and feature flags. Edits bump ``version`` and are snapshotted into
    PackageTierVersion. Tiers are deactivated, never deleted.
    """

    __tablename__ = "package_tiers"

    # Identity
    tier_name = db.Column(db.String(100), unique=True, nullable=False)
    tier_slug = db.Column(db.String(100), unique=True, nullable=False, index=True)
    display_name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=True)
    package_type = db.Column(
        SQLEnum(PackageType),
        nullable=False,
        default=PackageType.SINGLE_COMPANY
    )

    # Pricing (cents)
    monthly_price_cents = db.Column(db.Integer, nullable=False, default=0)
    annual_price_cents = db.Column(db.Integer, nullable=False, default=0)
    currency = db.Column(db.String(3), nullable=False, default="CAD")

    # Resource caps
    max_businesses = db.Column(db.Integer, nullable=False, default=1)
    max_properties = db.Column(db.Integer, nullable=False, default=0)
    max_units = db.Column(db.Integer, nullable=False, default=0)
    max_tenants = db.Column(db.Integer, nullable=False, default=0)
    max_users = db.Column(db.Integer, nullable=False, default=1)
    max_payment_methods = db.Column(db.Integer, nullable=False, default=1)

    # Feature flags, e.g. {"white_label": true, "multi_user": false}
    features = db.Column(db.JSON, nullable=True)

    # Display
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    is_featured = db.Column(db.Boolean, nullable=False, default=False)
    display_order = db.Column(db.Integer, nullable=False, default=0)

    version = db.Column(db.Integer, nullable=False, default=1)

    # Relationships
    versions = db.relationship(
        "PackageTierVersion",
        back_populates="package_tier",
        lazy="dynamic",
        order_by="PackageTierVersion.version.desc()",
        cascade="all, delete-orphan",
    )

    def snapshot(self) -> dict:
        """Values of the versioned fields."""
        return {field: getattr(self, field) for field in VERSIONED_FIELDS}

    def to_dict(self):
        """Convert model to dictionary."""
        data = super().to_dict()
        data.update({
            "tier_name": self.tier_name,
            "tier_slug": self.tier_slug,
            "display_name": self.display_name,
            "description": self.description,
            "package_type": self.package_type.value if self.package_type else None,
            "monthly_price_cents": self.monthly_price_cents,
            "annual_price_cents": self.annual_price_cents,
            "currency": self.currency,
            "max_businesses": self.max_businesses,
            "max_properties": self.max_properties,
            "max_units": self.max_units,
            "max_tenants": self.max_tenants,
            "max_users": self.max_users,
            "max_payment_methods": self.max_payment_methods,
            "features": self.features or {},
            "is_active": self.is_active,
            "is_featured": self.is_featured,
            "display_order": self.display_order,
            "version": self.version,
        })
        return data

    def __repr__(self):
        """String representation."""
        return f"<PackageTier {self.tier_slug} v{self.version}>"


class PackageTierVersion(BaseModel):
    """Immutable snapshot of a package tier at one version."""

    __tablename__ = "package_tier_versions"
    __table_args__ = (
        db.UniqueConstraint("package_tier_id", "version", name="uq_package_tier_version"),
    )

    package_tier_id = db.Column(
        db.Integer,
        db.ForeignKey("package_tiers.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    version = db.Column(db.Integer, nullable=False)

    tier_name = db.Column(db.String(100), nullable=False)
    display_name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=True)

    monthly_price_cents = db.Column(db.Integer, nullable=False)
    annual_price_cents = db.Column(db.Integer, nullable=False)
    currency = db.Column(db.String(3), nullable=False)

    max_businesses = db.Column(db.Integer, nullable=False)
    max_properties = db.Column(db.Integer, nullable=False)
    max_units = db.Column(db.Integer, nullable=False)
    max_tenants = db.Column(db.Integer, nullable=False)
    max_users = db.Column(db.Integer, nullable=False)
    max_payment_methods = db.Column(db.Integer, nullable=False)

    features = db.Column(db.JSON, nullable=True)

    change_notes = db.Column(db.Text, nullable=True)
    created_by = db.Column(db.String(100), nullable=True)

    package_tier = db.relationship("PackageTier", back_populates="versions")

    @classmethod
    def from_tier(cls, tier: PackageTier, change_notes=None, created_by=None):
        """Build a snapshot of the tier's current state."""
        return cls(
            package_tier_id=tier.id,
            version=tier.version,
            tier_name=tier.tier_name,
            display_name=tier.display_name,
            description=tier.description,
            currency=tier.currency,
            change_notes=change_notes,
            created_by=created_by,
            **{field: getattr(tier, field) for field in VERSIONED_FIELDS},
        )

    def __repr__(self):
        """String representation."""
        return f"<PackageTierVersion tier:{self.package_tier_id} v{self.version}>"
