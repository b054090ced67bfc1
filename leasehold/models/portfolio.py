"""
Countable portfolio resources.

Ownership chain: Organization -> Business -> Property -> Unit -> TenantAccess.
Each row carries an ``is_deleted`` soft-delete flag; NULL counts as not deleted.
"""

from leasehold import db
from leasehold.models import BaseModel


class Business(BaseModel):
    __tablename__ = "businesses"

    organization_id = db.Column(
        db.Integer,
        db.ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    name = db.Column(db.String(200), nullable=False)
    is_deleted = db.Column(db.Boolean, nullable=True, default=False)

    organization = db.relationship("Organization", back_populates="businesses")
    properties = db.relationship("Property", back_populates="business", lazy="dynamic")

    def to_dict(self):
        data = super().to_dict()
        data.update({
            "organization_id": self.organization_id,
            "name": self.name,
            "is_deleted": bool(self.is_deleted),
        })
        return data


class Property(BaseModel):
    __tablename__ = "properties"

    business_id = db.Column(
        db.Integer,
        db.ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    name = db.Column(db.String(200), nullable=False)
    address = db.Column(db.String(300), nullable=True)
    is_deleted = db.Column(db.Boolean, nullable=True, default=False)

    business = db.relationship("Business", back_populates="properties")
    units = db.relationship("Unit", back_populates="property", lazy="dynamic")

    def to_dict(self):
        data = super().to_dict()
        data.update({
            "business_id": self.business_id,
            "name": self.name,
            "address": self.address,
            "is_deleted": bool(self.is_deleted),
        })
        return data


class Unit(BaseModel):
    __tablename__ = "units"

    property_id = db.Column(
        db.Integer,
        db.ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    unit_number = db.Column(db.String(50), nullable=False)
    is_deleted = db.Column(db.Boolean, nullable=True, default=False)

    property = db.relationship("Property", back_populates="units")
    tenant_access = db.relationship("TenantAccess", back_populates="unit", lazy="dynamic")

    def to_dict(self):
        data = super().to_dict()
        data.update({
            "property_id": self.property_id,
            "unit_number": self.unit_number,
            "is_deleted": bool(self.is_deleted),
        })
        return data


class TenantAccess(BaseModel):
    """A rental tenant's access to a unit. Counts against max_tenants."""

    __tablename__ = "tenant_access"

    unit_id = db.Column(
        db.Integer,
        db.ForeignKey("units.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    tenant_name = db.Column(db.String(200), nullable=False)
    tenant_email = db.Column(db.String(120), nullable=True)
    is_deleted = db.Column(db.Boolean, nullable=True, default=False)

    unit = db.relationship("Unit", back_populates="tenant_access")

    def to_dict(self):
        data = super().to_dict()
        data.update({
            "unit_id": self.unit_id,
            "tenant_name": self.tenant_name,
            "tenant_email": self.tenant_email,
            "is_deleted": bool(self.is_deleted),
        })
        return data
