"""Relationship map tables

Revision ID: 001_relationship_map
Revises: 
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_relationship_map'
down_revision = None
branch_labels = None
depends_on = None

# Stored by member name, matching SQLEnum(RelationshipType)
relationship_type_enum = sa.Enum(
    'FAMILY',
    'CLOSE_FRIEND',
    'FRIEND',
    'COLLEAGUE',
    'MENTOR',
    'MENTEE',
    'ROMANTIC',
    'ACQUAINTANCE',
    name='relationshiptype',
)


def upgrade() -> None:
    # Create people table
    op.create_table(
        'people',
        sa.Column('pk', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('owner_id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('relationship_type', relationship_type_enum, nullable=False),
        sa.Column('support_roles', sa.JSON(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=False),
        sa.Column('contact_frequency_target', sa.String(), nullable=False),
        sa.Column('contact_count', sa.Integer(), nullable=False),
        sa.Column('health_score', sa.Integer(), nullable=False),
        sa.Column('last_contact_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('health_score >= 0 AND health_score <= 10', name='ck_people_health_score_range'),
        sa.CheckConstraint('contact_count >= 0', name='ck_people_contact_count_positive'),
        sa.PrimaryKeyConstraint('pk'),
    )
    op.create_index(op.f('ix_people_id'), 'people', ['id'], unique=True)
    op.create_index(op.f('ix_people_owner_id'), 'people', ['owner_id'], unique=False)

    # Create person_interactions table
    op.create_table(
        'person_interactions',
        sa.Column('pk', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('person_pk', sa.Integer(), nullable=False),
        sa.Column('person_id', sa.String(), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False),
        sa.Column('quality_score', sa.Integer(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=False),
        sa.Column('topics', sa.JSON(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('quality_score >= 1 AND quality_score <= 10', name='ck_interactions_quality_range'),
        sa.CheckConstraint('duration_minutes >= 0', name='ck_interactions_duration_positive'),
        sa.ForeignKeyConstraint(['person_pk'], ['people.pk'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('pk'),
        sa.UniqueConstraint('id'),
    )
    op.create_index(op.f('ix_person_interactions_person_pk'), 'person_interactions', ['person_pk'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_person_interactions_person_pk'), table_name='person_interactions')
    op.drop_table('person_interactions')
    op.drop_index(op.f('ix_people_owner_id'), table_name='people')
    op.drop_index(op.f('ix_people_id'), table_name='people')
    op.drop_table('people')
    relationship_type_enum.drop(op.get_bind(), checkfirst=True)
