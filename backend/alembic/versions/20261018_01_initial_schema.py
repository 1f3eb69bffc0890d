"""initial schema: users, businesses, therapists, associations, services, bookings

Revision ID: 20261018_01
Revises:
Create Date: 2026-10-18 00:00:00.000000
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = '20261018_01'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    ]


def _status(name: str, *values: str, **kw):
    return sa.Column(
        'status',
        sa.Enum(*values, name=name, native_enum=False, create_constraint=False),
        nullable=False,
        **kw,
    )


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column(
            'role',
            sa.Enum('customer', 'therapist', 'business', 'admin', name='userrole', native_enum=False, create_constraint=False),
            nullable=False,
        ),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'businesses',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('owner_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('website', sa.String(), nullable=True),
        sa.Column('street', sa.String(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('state', sa.String(), nullable=True),
        sa.Column('zip_code', sa.String(), nullable=True),
        sa.Column('country', sa.String(), nullable=True),
        sa.Column('currency', sa.String(3), nullable=True),
        sa.Column('opening_time', sa.String(5), nullable=True),
        sa.Column('closing_time', sa.String(5), nullable=True),
        _status('businessstatus', 'active', 'inactive', 'suspended'),
        *_timestamps(),
    )
    op.create_index('ix_businesses_owner_id', 'businesses', ['owner_id'])

    op.create_table(
        'therapists',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('full_name', sa.String(), nullable=False),
        sa.Column('professional_title', sa.String(), nullable=True),
        sa.Column('experience', sa.Integer(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('phone_number', sa.String(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'therapist_business_links',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('therapist_id', sa.Integer(), sa.ForeignKey('therapists.id', ondelete='CASCADE'), nullable=False),
        sa.Column('business_id', sa.Integer(), sa.ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False),
        _status('associationstatus', 'pending', 'approved', 'rejected'),
        sa.Column('requested_at', sa.DateTime(), nullable=True),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_therapist_business_links_therapist_id', 'therapist_business_links', ['therapist_id'])
    op.create_index('ix_therapist_business_links_business_id', 'therapist_business_links', ['business_id'])

    op.create_table(
        'business_therapist_links',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('business_id', sa.Integer(), sa.ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('therapist_id', sa.Integer(), sa.ForeignKey('therapists.id', ondelete='CASCADE'), nullable=False),
        _status('associationstatus', 'pending', 'approved', 'rejected'),
        sa.Column('requested_at', sa.DateTime(), nullable=True),
        sa.Column('joined_at', sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_business_therapist_links_business_id', 'business_therapist_links', ['business_id'])
    op.create_index('ix_business_therapist_links_therapist_id', 'business_therapist_links', ['therapist_id'])

    op.create_table(
        'services',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('business_id', sa.Integer(), sa.ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_services_business_id', 'services', ['business_id'])

    op.create_table(
        'service_therapists',
        sa.Column('service_id', sa.Integer(), sa.ForeignKey('services.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('therapist_id', sa.Integer(), sa.ForeignKey('therapists.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_table(
        'bookings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('therapist_id', sa.Integer(), sa.ForeignKey('therapists.id'), nullable=True),
        sa.Column('service_id', sa.Integer(), sa.ForeignKey('services.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('time', sa.String(5), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=True),
        _status(
            'bookingstatus',
            'pending', 'confirmed', 'therapist_confirmed', 'therapist_rejected',
            'cancelled', 'rescheduled', 'paid', 'no_show', 'completed',
        ),
        sa.Column(
            'payment_status',
            sa.Enum('pending', 'partial', 'completed', name='paymentstatus', native_enum=False, create_constraint=False),
            nullable=False,
        ),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('original_date', sa.DateTime(), nullable=True),
        sa.Column('original_time', sa.String(5), nullable=True),
        sa.Column('therapist_responded', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('response_visible_to_business_only', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('assigned_by_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('assigned_by_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('notification_destination', sa.String(32), nullable=False, server_default='customer'),
        sa.Column('confirmed_by_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('confirmed_at', sa.DateTime(), nullable=True),
        sa.Column('cancelled_by_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(), nullable=True),
        sa.Column('rescheduled_by_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('rescheduled_at', sa.DateTime(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('therapist_payout_status', sa.String(32), nullable=True),
        sa.Column('therapist_payout_amount', sa.Numeric(10, 2), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_bookings_customer_id', 'bookings', ['customer_id'])
    op.create_index('ix_bookings_therapist_id', 'bookings', ['therapist_id'])
    op.create_index('ix_bookings_service_id', 'bookings', ['service_id'])
    op.create_index('ix_bookings_date', 'bookings', ['date'])
    op.create_index('ix_bookings_status', 'bookings', ['status'])

    op.create_table(
        'therapist_availabilities',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('therapist_id', sa.Integer(), sa.ForeignKey('therapists.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('start_time', sa.String(5), nullable=False),
        sa.Column('end_time', sa.String(5), nullable=False),
        _status('availabilitystatus', 'available', 'booked', 'unavailable', 'on-leave'),
        *_timestamps(),
    )
    op.create_index('ix_therapist_availabilities_therapist_id', 'therapist_availabilities', ['therapist_id'])
    op.create_index('ix_therapist_availabilities_date', 'therapist_availabilities', ['date'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('booking_id', sa.Integer(), sa.ForeignKey('bookings.id', ondelete='CASCADE'), nullable=True),
        sa.Column(
            'type',
            sa.Enum(
                'booking_confirmed', 'booking_cancelled', 'booking_rescheduled', 'therapist_response',
                name='notificationtype', native_enum=False, create_constraint=False,
            ),
            nullable=False,
        ),
        sa.Column('message', sa.String(), nullable=False),
        sa.Column('link', sa.String(), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=True),
        sa.Column('timestamp', sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])


def downgrade() -> None:
    op.drop_table('notifications')
    op.drop_table('therapist_availabilities')
    op.drop_table('bookings')
    op.drop_table('service_therapists')
    op.drop_table('services')
    op.drop_table('business_therapist_links')
    op.drop_table('therapist_business_links')
    op.drop_table('therapists')
    op.drop_table('businesses')
    op.drop_table('users')
