"""Phase A: Bookings, invoices, lunch orders, tour offers, proposals

Revision ID: phase_a_001
Revises:
Create Date: 2026-10-17
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = 'phase_a_001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- Bookings ---
    op.create_table('bookings',
        sa.Column('id', sa.UUID(), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('booking_number', sa.String(length=20), nullable=False),
        sa.Column('customer_name', sa.String(length=255), nullable=False),
        sa.Column('customer_email', sa.String(length=255), nullable=False),
        sa.Column('customer_phone', sa.String(length=30), nullable=True),
        sa.Column('service_type', sa.String(length=30), nullable=False, server_default='wine_tour'),
        sa.Column('tour_date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.String(length=20), nullable=False),
        sa.Column('end_time', sa.String(length=20), nullable=True),
        sa.Column('duration_hours', sa.Numeric(precision=4, scale=1), nullable=False),
        sa.Column('party_size', sa.Integer(), nullable=False),
        sa.Column('pickup_location', sa.String(length=255), nullable=False),
        sa.Column('wineries', postgresql.JSONB(astext_type=sa.Text()), nullable=True, server_default='[]'),
        sa.Column('special_requests', sa.Text(), nullable=True),
        sa.Column('total_price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('deposit_paid', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column('balance_due', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('driver_name', sa.String(length=255), nullable=True),
        sa.Column('driver_email', sa.String(length=255), nullable=True),
        sa.Column('vehicle_name', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('booking_number'),
    )
    op.create_index('idx_bookings_tour_date', 'bookings', ['tour_date'])
    op.create_index('idx_bookings_status', 'bookings', ['status'])

    # --- Invoices ---
    op.create_table('invoices',
        sa.Column('id', sa.UUID(), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('invoice_number', sa.String(length=20), nullable=False),
        sa.Column('booking_id', sa.UUID(), nullable=False),
        sa.Column('invoice_type', sa.String(length=10), nullable=False),
        sa.Column('amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('actual_hours', sa.Numeric(precision=4, scale=1), nullable=True),
        sa.Column('hourly_rate', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='draft'),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('invoice_number'),
    )
    op.create_index('idx_invoices_booking', 'invoices', ['booking_id'])

    # --- Lunch orders ---
    op.create_table('lunch_orders',
        sa.Column('id', sa.UUID(), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('booking_id', sa.UUID(), nullable=False),
        sa.Column('restaurant_name', sa.String(length=255), nullable=False),
        sa.Column('restaurant_email', sa.String(length=255), nullable=False),
        sa.Column('arrival_time', sa.String(length=20), nullable=False),
        sa.Column('items', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default='[]'),
        sa.Column('total', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('dietary_restrictions', sa.Text(), nullable=True),
        sa.Column('special_requests', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('sent_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_lunch_orders_booking', 'lunch_orders', ['booking_id'])

    # --- Tour offers ---
    op.create_table('tour_offers',
        sa.Column('id', sa.UUID(), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('booking_id', sa.UUID(), nullable=False),
        sa.Column('driver_name', sa.String(length=255), nullable=False),
        sa.Column('driver_email', sa.String(length=255), nullable=False),
        sa.Column('pay_amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('estimated_hours', sa.Numeric(precision=4, scale=1), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('responded_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_tour_offers_pending', 'tour_offers', ['status', 'expires_at'])

    # --- Proposals ---
    op.create_table('proposals',
        sa.Column('id', sa.UUID(), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('proposal_number', sa.String(length=20), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=True),
        sa.Column('customer_name', sa.String(length=255), nullable=False),
        sa.Column('customer_email', sa.String(length=255), nullable=False),
        sa.Column('customer_phone', sa.String(length=30), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='draft'),
        sa.Column('valid_until', sa.Date(), nullable=True),
        sa.Column('discount_amount', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('sent_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('viewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('proposal_number'),
    )

    op.create_table('proposal_service_items',
        sa.Column('id', sa.UUID(), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('proposal_id', sa.UUID(), nullable=False),
        sa.Column('sequence', sa.Integer(), nullable=False),
        sa.Column('service_type', sa.String(length=30), nullable=False),
        sa.Column('service_date', sa.Date(), nullable=True),
        sa.Column('party_size', sa.Integer(), nullable=False),
        sa.Column('duration_hours', sa.Numeric(precision=4, scale=1), nullable=True),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('route', sa.String(length=40), nullable=True),
        sa.Column('miles', sa.Numeric(precision=6, scale=1), nullable=True),
        sa.ForeignKeyConstraint(['proposal_id'], ['proposals.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_service_items_proposal', 'proposal_service_items', ['proposal_id', 'sequence'])


def downgrade() -> None:
    op.drop_table('proposal_service_items')
    op.drop_table('proposals')
    op.drop_table('tour_offers')
    op.drop_table('lunch_orders')
    op.drop_table('invoices')
    op.drop_table('bookings')
