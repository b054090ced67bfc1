"""Organization (billing tenant) models."""

from sqlalchemy import Enum as SQLEnum
from leasehold import db
from leasehold.models import BaseModel
from leasehold.models.enums import BillingCycle, MemberRole


# Override columns, keyed by the tier field they replace
CUSTOM_PRICE_FIELDS = {
    "monthly_price_cents": "custom_monthly_price_cents",
    "annual_price_cents": "custom_annual_price_cents",
}

CUSTOM_LIMIT_FIELDS = {
    "max_businesses": "custom_max_businesses",
    "max_properties": "custom_max_properties",
    "max_units": "custom_max_units",
    "max_tenants": "custom_max_tenants",
    "max_users": "custom_max_users",
    "max_payment_methods": "custom_max_payment_methods",
}


class Organization(BaseModel):
    """
    Organization model.

    The billing tenant: owns businesses, members, package settings and
    add-on purchases. Entitlements are always resolved per organization.
    """

    __tablename__ = "organizations"

    name = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(100), unique=True, nullable=False, index=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    # Relationships
    members = db.relationship(
        "OrganizationMember",
        back_populates="organization",
        lazy="dynamic",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    package_settings = db.relationship(
        "OrganizationPackageSettings",
        back_populates="organization",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    businesses = db.relationship(
        "Business",
        back_populates="organization",
        lazy="dynamic",
        passive_deletes=True
    )

    def to_dict(self):
        """Convert model to dictionary."""
        data = super().to_dict()
        data.update({
            "name": self.name,
            "slug": self.slug,
            "is_active": self.is_active,
        })
        return data

    def __repr__(self):
        """String representation."""
        return f"<Organization {self.slug}>"


class OrganizationMember(BaseModel):
    """A user seat in an organization. Active members count against max_users."""

    __tablename__ = "organization_members"
    __table_args__ = (
        db.UniqueConstraint("organization_id", "email", name="uq_organization_member_email"),
    )

    organization_id = db.Column(
        db.Integer,
        db.ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    email = db.Column(db.String(120), nullable=False)
    role = db.Column(SQLEnum(MemberRole), nullable=False, default=MemberRole.MEMBER)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    organization = db.relationship("Organization", back_populates="members")

    def to_dict(self):
        """Convert model to dictionary."""
        data = super().to_dict()
        data.update({
            "organization_id": self.organization_id,
            "email": self.email,
            "role": self.role.value if self.role else None,
            "is_active": self.is_active,
        })
        return data


class OrganizationPackageSettings(BaseModel):
    """
    Organization Package Settings model.

    At most one row per organization. References a tier and the tier
    version it was pinned to; any non-null ``custom_*`` column takes
    precedence over the tier's value. ``has_custom_pricing`` and
    ``has_custom_limits`` are display hints only.
    """

    __tablename__ = "organization_package_settings"

    organization_id = db.Column(
        db.Integer,
        db.ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True
    )

    # Current package assignment
    package_tier_id = db.Column(
        db.Integer,
        db.ForeignKey("package_tiers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    package_version = db.Column(db.Integer, nullable=False, default=1)

    # Custom overrides (NULL means use the tier value)
    custom_monthly_price_cents = db.Column(db.Integer, nullable=True)
    custom_annual_price_cents = db.Column(db.Integer, nullable=True)
    custom_max_businesses = db.Column(db.Integer, nullable=True)
    custom_max_properties = db.Column(db.Integer, nullable=True)
    custom_max_units = db.Column(db.Integer, nullable=True)
    custom_max_tenants = db.Column(db.Integer, nullable=True)
    custom_max_users = db.Column(db.Integer, nullable=True)
    custom_max_payment_methods = db.Column(db.Integer, nullable=True)
    custom_features = db.Column(db.JSON, nullable=True)

    # Override hints
    has_custom_pricing = db.Column(db.Boolean, nullable=False, default=False)
    has_custom_limits = db.Column(db.Boolean, nullable=False, default=False)
    override_notes = db.Column(db.Text, nullable=True)

    # Billing
    billing_cycle = db.Column(SQLEnum(BillingCycle), nullable=False, default=BillingCycle.MONTHLY)
    current_period_start = db.Column(db.DateTime, nullable=True)
    current_period_end = db.Column(db.DateTime, nullable=True)

    updated_by = db.Column(db.String(100), nullable=True)

    # Relationships
    organization = db.relationship("Organization", back_populates="package_settings")
    package_tier = db.relationship("PackageTier")

    def refresh_override_flags(self) -> None:
        """Recompute the display hints from the custom columns."""
        self.has_custom_pricing = any(
            getattr(self, column) is not None for column in CUSTOM_PRICE_FIELDS.values()
        )
        self.has_custom_limits = any(
            getattr(self, column) is not None for column in CUSTOM_LIMIT_FIELDS.values()
        )

    def clear_overrides(self) -> None:
        for column in list(CUSTOM_PRICE_FIELDS.values()) + list(CUSTOM_LIMIT_FIELDS.values()):
            setattr(self, column, None)
        self.custom_features = None
        self.refresh_override_flags()

    def __repr__(self):
        """String representation."""
        return (
            f"<OrganizationPackageSettings org:{self.organization_id} "
            f"tier:{self.package_tier_id} v{self.package_version}>"
        )
