"""Initial migration

Revision ID: 001
Revises:
Create Date: 2024-01-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

user_type = sa.Enum('CUSTOMER', 'OWNER', 'ADMIN', name='usertype')
store_status = sa.Enum('PENDING', 'ACTIVE', 'INACTIVE', 'DELETED', name='storestatus')
reservation_status = sa.Enum('PENDING', 'CONFIRMED', 'COMPLETED', 'CANCELLED', 'NO_SHOW', name='reservationstatus')


def upgrade() -> None:
    # Create users table
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('email', sa.String(255), unique=True, nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('nickname', sa.String(50)),
        sa.Column('phone', sa.String(20)),
        sa.Column('user_type', user_type, nullable=False),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('refresh_token', sa.String(500)),
        sa.Column('last_login', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create stores table
    op.create_table(
        'stores',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('owner_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('address', sa.String(200), nullable=False),
        sa.Column('phone', sa.String(20)),
        sa.Column('cuisine_type', sa.String(30), default='KOREAN'),
        sa.Column('price_range', sa.String(20), default='MID_RANGE'),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('average_meal_duration', sa.Integer(), nullable=False, server_default='120'),
        sa.Column('accepts_reservations', sa.Boolean(), default=True),
        sa.Column('status', store_status, nullable=False, server_default='PENDING'),
        sa.Column('rating', sa.Float(), default=0.0),
        sa.Column('review_count', sa.Integer(), default=0),
        sa.Column('total_reservations', sa.Integer(), default=0),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create business_hours table
    op.create_table(
        'business_hours',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('store_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('stores.id'), nullable=False),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('open_time', sa.String(5), nullable=False),
        sa.Column('close_time', sa.String(5), nullable=False),
        sa.Column('is_closed', sa.Boolean(), default=False),
        sa.Column('break_start', sa.String(5)),
        sa.Column('break_end', sa.String(5)),
        sa.UniqueConstraint('store_id', 'day_of_week', name='uq_business_hours_day'),
    )

    # Create tables table
    op.create_table(
        'tables',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('store_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('stores.id'), nullable=False),
        sa.Column('table_number', sa.String(20), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('table_type', sa.String(20), default='REGULAR'),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
    )

    # Create reservations table
    op.create_table(
        'reservations',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('reservation_number', sa.String(30), nullable=False),
        sa.Column('store_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('stores.id'), nullable=False),
        sa.Column('customer_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('table_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('tables.id')),
        sa.Column('reservation_date', sa.Date(), nullable=False),
        sa.Column('reservation_time', sa.String(5), nullable=False),
        sa.Column('estimated_duration', sa.Integer()),
        sa.Column('party_size', sa.Integer(), nullable=False),
        sa.Column('special_requests', sa.Text()),
        sa.Column('contact_name', sa.String(50)),
        sa.Column('contact_phone', sa.String(20)),
        sa.Column('deposit_amount', sa.Integer(), default=0),
        sa.Column('total_amount', sa.Integer()),
        sa.Column('status', reservation_status, nullable=False, server_default='PENDING'),
        sa.Column('cancellation_reason', sa.Text()),
        sa.Column('confirmed_at', sa.DateTime()),
        sa.Column('completed_at', sa.DateTime()),
        sa.Column('reminder_sent_at', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create reservation_logs table
    op.create_table(
        'reservation_logs',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('reservation_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('reservations.id'), nullable=False),
        sa.Column('actor_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id')),
        sa.Column('actor_type', sa.String(20)),
        sa.Column('action', sa.String(50), nullable=False),
        sa.Column('from_status', sa.String(20)),
        sa.Column('to_status', sa.String(20)),
        sa.Column('note', sa.Text()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
    )

    # Create reviews table
    op.create_table(
        'reviews',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('reservation_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('reservations.id'), unique=True, nullable=False),
        sa.Column('store_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('stores.id'), nullable=False),
        sa.Column('customer_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('service_rating', sa.Integer()),
        sa.Column('food_rating', sa.Integer()),
        sa.Column('atmosphere_rating', sa.Integer()),
        sa.Column('value_rating', sa.Integer()),
        sa.Column('comment', sa.Text()),
        sa.Column('would_recommend', sa.Boolean()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
    )

    # Create indexes
    op.create_index('ix_stores_owner_id', 'stores', ['owner_id'])
    op.create_index('ix_reservations_customer', 'reservations', ['customer_id'])
    op.create_index('ix_reservation_logs_reservation_id', 'reservation_logs', ['reservation_id'])
    op.create_index('ix_reviews_store_id', 'reviews', ['store_id'])

    # At most one active reservation per slot
    op.create_index(
        'uq_reservations_active_slot',
        'reservations',
        ['store_id', 'reservation_date', 'reservation_time'],
        unique=True,
        postgresql_where=sa.text("status IN ('PENDING', 'CONFIRMED')"),
    )


def downgrade() -> None:
    op.drop_index('uq_reservations_active_slot', table_name='reservations')
    op.drop_table('reviews')
    op.drop_table('reservation_logs')
    op.drop_table('reservations')
    op.drop_table('tables')
    op.drop_table('business_hours')
    op.drop_table('stores')
    op.drop_table('users')
    reservation_status.drop(op.get_bind(), checkfirst=True)
    store_status.drop(op.get_bind(), checkfirst=True)
    user_type.drop(op.get_bind(), checkfirst=True)
