"""add announcements, courses, volunteers, friend requests and member profile

Revision ID: 8c41e0b5a2d3
Revises: 3f2a9c1d7b10
Create Date: 2025-04-12 09:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8c41e0b5a2d3'
down_revision: Union[str, None] = '3f2a9c1d7b10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

course_enrollment_status = sa.Enum('pending', 'confirmed', 'rejected', name='course_enrollment_status')
friend_request_reason = sa.Enum('oracion', 'visita', 'informacion', name='friend_request_reason')

MEMBER_PROFILE_COLUMNS = [
    ('gender', sa.String()),
    ('marital_status', sa.String()),
    ('address', sa.String()),
    ('preferred_contact_method', sa.String()),
    ('baptism_year', sa.Integer()),
    ('ministry', sa.String()),
    ('areas_to_serve', sa.String()),
    ('suggestions', sa.String()),
    ('pastoral_notes', sa.String()),
    ('current_acceptance_year', sa.Integer()),
    ('current_acceptance_method', sa.String()),
    ('current_membership_church', sa.String()),
    ('current_occupation', sa.String()),
    ('work_or_study_place', sa.String()),
    ('professional_area', sa.String()),
    ('education_level', sa.String()),
    ('profession', sa.String()),
    ('work_experience', sa.String()),
    ('technical_skills', sa.String()),
    ('soft_skills', sa.String()),
    ('languages', sa.String()),
    ('medical_conditions', sa.String()),
    ('special_needs', sa.String()),
    ('interests_hobbies', sa.String()),
    ('volunteering_availability', sa.String()),
]


def upgrade() -> None:
    for name, type_ in MEMBER_PROFILE_COLUMNS:
        op.add_column('members', sa.Column(name, type_, nullable=True))
    op.add_column(
        'members',
        sa.Column('willing_to_lead', sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.add_column(
        'members',
        sa.Column('transfer_authorization', sa.Boolean(), nullable=False, server_default=sa.false()),
    )

    op.create_table(
        'announcements',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('content', sa.String(), nullable=False),
        sa.Column('announcement_date', sa.Date(), nullable=False),
        sa.Column('department', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_announcements_announcement_date', 'announcements', ['announcement_date'])
    op.create_index('ix_announcements_is_active', 'announcements', ['is_active'])

    op.create_table(
        'courses',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('content', sa.String(), nullable=False),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('color', sa.String(), nullable=False, server_default='#4b207f'),
        sa.Column('cost', sa.Float(), nullable=False, server_default='0'),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('capacity', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_courses_slug', 'courses', ['slug'], unique=True)

    op.create_table(
        'course_enrollments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('course_id', sa.Integer(), sa.ForeignKey('courses.id'), nullable=False),
        sa.Column('document_number', sa.String(), nullable=False),
        sa.Column('full_name', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=False),
        sa.Column('birth_date', sa.Date(), nullable=False),
        sa.Column('is_member', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('payment_proof_url', sa.String(), nullable=True),
        sa.Column('status', course_enrollment_status, nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('course_id', 'document_number', name='uq_course_enrollment_document'),
    )
    op.create_index('ix_course_enrollments_course_id', 'course_enrollments', ['course_id'])
    op.create_index('ix_course_enrollments_document_number', 'course_enrollments', ['document_number'])

    op.create_table(
        'volunteer_events',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('event_date', sa.Date(), nullable=False),
        sa.Column('services', sa.JSON(), nullable=True),
        sa.Column('max_capacities', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_volunteer_events_event_date', 'volunteer_events', ['event_date'])

    op.create_table(
        'volunteer_registrations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('volunteer_event_id', sa.Integer(), sa.ForeignKey('volunteer_events.id'), nullable=False),
        sa.Column('member_document_id', sa.String(), nullable=False),
        sa.Column('member_id', sa.Integer(), sa.ForeignKey('members.id'), nullable=True),
        sa.Column('selected_service', sa.String(), nullable=False),
        sa.Column('has_transport', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('transport_slots', sa.Integer(), nullable=True),
        sa.Column('diet_type', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint(
            'volunteer_event_id', 'member_document_id', name='uq_volunteer_registration_member'
        ),
    )
    op.create_index(
        'ix_volunteer_registrations_volunteer_event_id', 'volunteer_registrations', ['volunteer_event_id']
    )
    op.create_index(
        'ix_volunteer_registrations_member_document_id', 'volunteer_registrations', ['member_document_id']
    )

    op.create_table(
        'friend_requests',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=False),
        sa.Column('address', sa.String(), nullable=False, server_default=''),
        sa.Column('reason', friend_request_reason, nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_friend_requests_is_read', 'friend_requests', ['is_read'])


def downgrade() -> None:
    op.drop_table('friend_requests')
    op.drop_table('volunteer_registrations')
    op.drop_table('volunteer_events')
    op.drop_table('course_enrollments')
    op.drop_table('courses')
    op.drop_table('announcements')
    op.drop_column('members', 'transfer_authorization')
    op.drop_column('members', 'willing_to_lead')
    for name, _ in reversed(MEMBER_PROFILE_COLUMNS):
        op.drop_column('members', name)
    course_enrollment_status.drop(op.get_bind(), checkfirst=True)
    friend_request_reason.drop(op.get_bind(), checkfirst=True)
