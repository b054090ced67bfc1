"""Add-on product and purchase models."""

from datetime import datetime
from sqlalchemy import Enum as SQLEnum
from leasehold import db
from leasehold.models import BaseModel
from leasehold.models.enums import AddonType, AddonPurchaseStatus


class AddonProduct(BaseModel):
    """
    Add-on Product model.

    Recurring incremental capacity for one resource type. Each purchased
    unit raises the matching cap by ``units_per_addon``.
    """

    __tablename__ = "addon_products"

    slug = db.Column(db.String(100), unique=True, nullable=False, index=True)
    addon_type = db.Column(SQLEnum(AddonType), nullable=False, index=True)
    display_name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=True)
    monthly_price_cents = db.Column(db.Integer, nullable=False, default=0)
    currency = db.Column(db.String(3), nullable=False, default="CAD")
    units_per_addon = db.Column(db.Integer, nullable=False, default=1)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    def to_dict(self):
        """Convert model to dictionary."""
        data = super().to_dict()
        data.update({
            "slug": self.slug,
            "addon_type": self.addon_type.value if self.addon_type else None,
            "display_name": self.display_name,
            "description": self.description,
            "monthly_price_cents": self.monthly_price_cents,
            "currency": self.currency,
            "units_per_addon": self.units_per_addon,
            "is_active": self.is_active,
        })
        return data

    def __repr__(self):
        """String representation."""
        return f"<AddonProduct {self.slug}>"


class AddonPurchase(BaseModel):
    """
    Add-on Purchase model.

    A cancelled purchase stays in effect until ``next_billing_date``;
    expiry is evaluated when the purchase is read, not by a job.
    """

    __tablename__ = "addon_purchases"
    __table_args__ = (
        db.CheckConstraint("quantity > 0", name="ck_addon_purchase_quantity_positive"),
    )

    organization_id = db.Column(
        db.Integer,
        db.ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    addon_product_id = db.Column(
        db.Integer,
        db.ForeignKey("addon_products.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    quantity = db.Column(db.Integer, nullable=False, default=1)
    status = db.Column(
        SQLEnum(AddonPurchaseStatus),
        nullable=False,
        default=AddonPurchaseStatus.ACTIVE,
        index=True
    )
    purchase_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    next_billing_date = db.Column(db.DateTime, nullable=True)
    cancelled_at = db.Column(db.DateTime, nullable=True)
    purchased_by = db.Column(db.String(100), nullable=True)

    addon_product = db.relationship("AddonProduct", lazy="joined")

    def is_in_effect(self, at: datetime = None) -> bool:
        """Whether this purchase still raises the cap at ``at``."""
        at = at or datetime.utcnow()
        if self.status == AddonPurchaseStatus.ACTIVE:
            return True
        if self.status == AddonPurchaseStatus.CANCELLED:
            return self.next_billing_date is not None and self.next_billing_date > at
        return False

    @property
    def in_effect(self) -> bool:
        return self.is_in_effect()

    def to_dict(self):
        """Convert model to dictionary."""
        data = super().to_dict()
        data.update({
            "organization_id": self.organization_id,
            "addon_product_id": self.addon_product_id,
            "addon_product": self.addon_product.to_dict() if self.addon_product else None,
            "quantity": self.quantity,
            "status": self.status.value if self.status else None,
            "purchase_date": self.purchase_date.isoformat() if self.purchase_date else None,
            "next_billing_date": self.next_billing_date.isoformat() if self.next_billing_date else None,
            "cancelled_at": self.cancelled_at.isoformat() if self.cancelled_at else None,
            "is_in_effect": self.is_in_effect(),
        })
        return data

    def __repr__(self):
        """String representation."""
        return f"<AddonPurchase org:{self.organization_id} x{self.quantity} {self.status.value}>"
