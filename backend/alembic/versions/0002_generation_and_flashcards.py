"""Study guide generation instructions and flashcard progress

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-17 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '0002'
down_revision = '0001'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column('study_guides', sa.Column('additional_instructions', sa.Text(), nullable=True))

    flashcard_status = postgresql.ENUM('mastered', 'difficult', name='flashcard_status')
    flashcard_status.create(op.get_bind())

    op.create_table('flashcard_progress',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('study_guide_id', sa.String(length=36), nullable=False),
        sa.Column('card_id', sa.String(length=100), nullable=False),
        sa.Column('status', postgresql.ENUM(name='flashcard_status', create_type=False), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['user_profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['study_guide_id'], ['study_guides.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'study_guide_id', 'card_id', name='uq_flashcard_progress_user_guide_card')
    )
    op.create_index('idx_flashcard_progress_user_id', 'flashcard_progress', ['user_id'])
    op.create_index('idx_flashcard_progress_study_guide_id', 'flashcard_progress', ['study_guide_id'])


def downgrade() -> None:
    op.drop_index('idx_flashcard_progress_study_guide_id', table_name='flashcard_progress')
    op.drop_index('idx_flashcard_progress_user_id', table_name='flashcard_progress')
    op.drop_table('flashcard_progress')
    op.execute('DROP TYPE IF EXISTS flashcard_status')
    op.drop_column('study_guides', 'additional_instructions')
