"""add entitlement system

Revision ID: 001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade():
    """
    Create tables for the entitlement system.

    Order is critical:
    1. package_tiers, organizations, addon_products, audit_logs (no dependencies)
    2. package_tier_versions, organization_members, organization_package_settings,
       package_upgrade_notifications, addon_purchases
    3. businesses -> properties -> units -> tenant_access
    """

    # 1. Package tiers
    op.create_table(
        'package_tiers',
        *_timestamps(),
        sa.Column('tier_name', sa.String(length=100), nullable=False),
        sa.Column('tier_slug', sa.String(length=100), nullable=False),
        sa.Column('display_name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('package_type', sa.Enum('SINGLE_COMPANY', 'MANAGEMENT_COMPANY', name='packagetype'), nullable=False),
        sa.Column('monthly_price_cents', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('annual_price_cents', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('currency', sa.String(length=3), nullable=False, server_default='CAD'),
        sa.Column('max_businesses', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('max_properties', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('max_units', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('max_tenants', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('max_users', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('max_payment_methods', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('features', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('is_featured', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tier_name'),
    )
    op.create_index('ix_package_tiers_tier_slug', 'package_tiers', ['tier_slug'], unique=True)

    # 2. Organizations
    op.create_table(
        'organizations',
        *_timestamps(),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('slug', sa.String(length=100), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_organizations_slug', 'organizations', ['slug'], unique=True)

    # 3. Add-on products
    op.create_table(
        'addon_products',
        *_timestamps(),
        sa.Column('slug', sa.String(length=100), nullable=False),
        sa.Column(
            'addon_type',
            sa.Enum('BUSINESS', 'PROPERTY', 'UNIT', 'TENANT', 'TEAM_MEMBER', name='addontype'),
            nullable=False,
        ),
        sa.Column('display_name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('monthly_price_cents', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('currency', sa.String(length=3), nullable=False, server_default='CAD'),
        sa.Column('units_per_addon', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_addon_products_slug', 'addon_products', ['slug'], unique=True)
    op.create_index('ix_addon_products_addon_type', 'addon_products', ['addon_type'])

    # 4. Audit logs
    op.create_table(
        'audit_logs',
        *_timestamps(),
        sa.Column('action', sa.String(length=50), nullable=False),
        sa.Column('entity_type', sa.String(length=100), nullable=False),
        sa.Column('entity_id', sa.Integer(), nullable=False),
        sa.Column('changes', sa.JSON(), nullable=True),
        sa.Column('changed_by', sa.String(length=100), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_audit_logs_action', 'audit_logs', ['action'])
    op.create_index('ix_audit_logs_entity_type', 'audit_logs', ['entity_type'])
    op.create_index('ix_audit_logs_entity_id', 'audit_logs', ['entity_id'])

    # 5. Tier version history
    op.create_table(
        'package_tier_versions',
        *_timestamps(),
        sa.Column('package_tier_id', sa.Integer(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('tier_name', sa.String(length=100), nullable=False),
        sa.Column('display_name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('monthly_price_cents', sa.Integer(), nullable=False),
        sa.Column('annual_price_cents', sa.Integer(), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False),
        sa.Column('max_businesses', sa.Integer(), nullable=False),
        sa.Column('max_properties', sa.Integer(), nullable=False),
        sa.Column('max_units', sa.Integer(), nullable=False),
        sa.Column('max_tenants', sa.Integer(), nullable=False),
        sa.Column('max_users', sa.Integer(), nullable=False),
        sa.Column('max_payment_methods', sa.Integer(), nullable=False),
        sa.Column('features', sa.JSON(), nullable=True),
        sa.Column('change_notes', sa.Text(), nullable=True),
        sa.Column('created_by', sa.String(length=100), nullable=True),
        sa.ForeignKeyConstraint(['package_tier_id'], ['package_tiers.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('package_tier_id', 'version', name='uq_package_tier_version'),
    )
    op.create_index('ix_package_tier_versions_package_tier_id', 'package_tier_versions', ['package_tier_id'])

    # 6. Organization members
    op.create_table(
        'organization_members',
        *_timestamps(),
        sa.Column('organization_id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=120), nullable=False),
        sa.Column('role', sa.Enum('OWNER', 'ADMIN', 'MEMBER', name='memberrole'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('organization_id', 'email', name='uq_organization_member_email'),
    )
    op.create_index('ix_organization_members_organization_id', 'organization_members', ['organization_id'])

    # 7. Organization package settings (one row per organization)
    op.create_table(
        'organization_package_settings',
        *_timestamps(),
        sa.Column('organization_id', sa.Integer(), nullable=False),
        sa.Column('package_tier_id', sa.Integer(), nullable=False),
        sa.Column('package_version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('custom_monthly_price_cents', sa.Integer(), nullable=True),
        sa.Column('custom_annual_price_cents', sa.Integer(), nullable=True),
        sa.Column('custom_max_businesses', sa.Integer(), nullable=True),
        sa.Column('custom_max_properties', sa.Integer(), nullable=True),
        sa.Column('custom_max_units', sa.Integer(), nullable=True),
        sa.Column('custom_max_tenants', sa.Integer(), nullable=True),
        sa.Column('custom_max_users', sa.Integer(), nullable=True),
        sa.Column('custom_max_payment_methods', sa.Integer(), nullable=True),
        sa.Column('custom_features', sa.JSON(), nullable=True),
        sa.Column('has_custom_pricing', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('has_custom_limits', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('override_notes', sa.Text(), nullable=True),
        sa.Column('billing_cycle', sa.Enum('MONTHLY', 'ANNUAL', name='billingcycle'), nullable=False),
        sa.Column('current_period_start', sa.DateTime(), nullable=True),
        sa.Column('current_period_end', sa.DateTime(), nullable=True),
        sa.Column('updated_by', sa.String(length=100), nullable=True),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['package_tier_id'], ['package_tiers.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_organization_package_settings_organization_id',
        'organization_package_settings',
        ['organization_id'],
        unique=True,
    )
    op.create_index(
        'ix_organization_package_settings_package_tier_id',
        'organization_package_settings',
        ['package_tier_id'],
    )

    # 8. Upgrade notifications
    op.create_table(
        'package_upgrade_notifications',
        *_timestamps(),
        sa.Column('organization_id', sa.Integer(), nullable=False),
        sa.Column('package_tier_id', sa.Integer(), nullable=False),
        sa.Column('old_version', sa.Integer(), nullable=False),
        sa.Column('new_version', sa.Integer(), nullable=False),
        sa.Column('changes_summary', sa.JSON(), nullable=True),
        sa.Column('pricing_changed', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('limits_changed', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('features_changed', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column(
            'status',
            sa.Enum('PENDING', 'ACCEPTED', 'DECLINED', 'EXPIRED', name='notificationstatus'),
            nullable=False,
        ),
        sa.Column('notified_at', sa.DateTime(), nullable=False),
        sa.Column('responded_at', sa.DateTime(), nullable=True),
        sa.Column('responded_by', sa.String(length=100), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['package_tier_id'], ['package_tiers.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_package_upgrade_notifications_organization_id',
        'package_upgrade_notifications',
        ['organization_id'],
    )
    op.create_index('ix_package_upgrade_notifications_status', 'package_upgrade_notifications', ['status'])

    # 9. Add-on purchases
    op.create_table(
        'addon_purchases',
        *_timestamps(),
        sa.Column('organization_id', sa.Integer(), nullable=False),
        sa.Column('addon_product_id', sa.Integer(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('status', sa.Enum('ACTIVE', 'CANCELLED', 'EXPIRED', name='addonpurchasestatus'), nullable=False),
        sa.Column('purchase_date', sa.DateTime(), nullable=False),
        sa.Column('next_billing_date', sa.DateTime(), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(), nullable=True),
        sa.Column('purchased_by', sa.String(length=100), nullable=True),
        sa.CheckConstraint('quantity > 0', name='ck_addon_purchase_quantity_positive'),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['addon_product_id'], ['addon_products.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_addon_purchases_organization_id', 'addon_purchases', ['organization_id'])
    op.create_index('ix_addon_purchases_addon_product_id', 'addon_purchases', ['addon_product_id'])
    op.create_index('ix_addon_purchases_status', 'addon_purchases', ['status'])

    # 10. Portfolio: businesses -> properties -> units -> tenant_access
    op.create_table(
        'businesses',
        *_timestamps(),
        sa.Column('organization_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('is_deleted', sa.Boolean(), nullable=True, server_default='false'),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_businesses_organization_id', 'businesses', ['organization_id'])

    op.create_table(
        'properties',
        *_timestamps(),
        sa.Column('business_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('address', sa.String(length=300), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), nullable=True, server_default='false'),
        sa.ForeignKeyConstraint(['business_id'], ['businesses.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_properties_business_id', 'properties', ['business_id'])

    op.create_table(
        'units',
        *_timestamps(),
        sa.Column('property_id', sa.Integer(), nullable=False),
        sa.Column('unit_number', sa.String(length=50), nullable=False),
        sa.Column('is_deleted', sa.Boolean(), nullable=True, server_default='false'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_units_property_id', 'units', ['property_id'])

    op.create_table(
        'tenant_access',
        *_timestamps(),
        sa.Column('unit_id', sa.Integer(), nullable=False),
        sa.Column('tenant_name', sa.String(length=200), nullable=False),
        sa.Column('tenant_email', sa.String(length=120), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), nullable=True, server_default='false'),
        sa.ForeignKeyConstraint(['unit_id'], ['units.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tenant_access_unit_id', 'tenant_access', ['unit_id'])


def downgrade():
    """Drop all entitlement tables in reverse order."""

    op.drop_index('ix_tenant_access_unit_id', table_name='tenant_access')
    op.drop_table('tenant_access')
    op.drop_index('ix_units_property_id', table_name='units')
    op.drop_table('units')
    op.drop_index('ix_properties_business_id', table_name='properties')
    op.drop_table('properties')
    op.drop_index('ix_businesses_organization_id', table_name='businesses')
    op.drop_table('businesses')

    op.drop_index('ix_addon_purchases_status', table_name='addon_purchases')
    op.drop_index('ix_addon_purchases_addon_product_id', table_name='addon_purchases')
    op.drop_index('ix_addon_purchases_organization_id', table_name='addon_purchases')
    op.drop_table('addon_purchases')

    op.drop_index('ix_package_upgrade_notifications_status', table_name='package_upgrade_notifications')
    op.drop_index('ix_package_upgrade_notifications_organization_id', table_name='package_upgrade_notifications')
    op.drop_table('package_upgrade_notifications')

    op.drop_index('ix_organization_package_settings_package_tier_id', table_name='organization_package_settings')
    op.drop_index('ix_organization_package_settings_organization_id', table_name='organization_package_settings')
    op.drop_table('organization_package_settings')

    op.drop_index('ix_organization_members_organization_id', table_name='organization_members')
    op.drop_table('organization_members')

    op.drop_index('ix_package_tier_versions_package_tier_id', table_name='package_tier_versions')
    op.drop_table('package_tier_versions')

    op.drop_index('ix_audit_logs_entity_id', table_name='audit_logs')
    op.drop_index('ix_audit_logs_entity_type', table_name='audit_logs')
    op.drop_index('ix_audit_logs_action', table_name='audit_logs')
    op.drop_table('audit_logs')

    op.drop_index('ix_addon_products_addon_type', table_name='addon_products')
    op.drop_index('ix_addon_products_slug', table_name='addon_products')
    op.drop_table('addon_products')

    op.drop_index('ix_organizations_slug', table_name='organizations')
    op.drop_table('organizations')

    op.drop_index('ix_package_tiers_tier_slug', table_name='package_tiers')
    op.drop_table('package_tiers')

    if op.get_bind().dialect.name != "postgresql":
        return

    for enum_name in (
        'addonpurchasestatus',
        'notificationstatus',
        'billingcycle',
        'memberrole',
        'addontype',
        'packagetype',
    ):
        op.execute(f"DROP TYPE IF EXISTS {enum_name}")
