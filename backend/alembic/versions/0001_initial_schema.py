"""Initial schema

Revision ID: 0001
Revises:
Create Date: 2026-09-28 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create custom types
    user_type = postgresql.ENUM('teacher', 'student', name='user_type')
    user_type.create(op.get_bind())

    guide_format = postgresql.ENUM('outline', 'flashcards', 'quiz', 'summary', 'custom', name='guide_format')
    guide_format.create(op.get_bind())

    # Create user_profiles table
    op.create_table('user_profiles',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=True),
        sa.Column('user_type', postgresql.ENUM(name='user_type', create_type=False), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('display_name', sa.String(length=255), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('is_profile_public', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('clever_id', sa.String(length=64), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
        sa.UniqueConstraint('clever_id')
    )

    # Create teacher_follows table
    op.create_table('teacher_follows',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('follower_id', sa.String(length=36), nullable=False),
        sa.Column('teacher_id', sa.String(length=36), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['follower_id'], ['user_profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['teacher_id'], ['user_profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('follower_id', 'teacher_id', name='uq_teacher_follows_follower_teacher')
    )

    # Create student_classes table
    op.create_table('student_classes',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('student_id', sa.String(length=36), nullable=False),
        sa.Column('teacher_id', sa.String(length=36), nullable=False),
        sa.Column('class_name', sa.String(length=255), nullable=False),
        sa.Column('class_period', sa.String(length=50), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['student_id'], ['user_profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['teacher_id'], ['user_profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('student_id', 'teacher_id', 'class_name', name='uq_student_classes_student_teacher_class')
    )

    # Create study_guides table
    op.create_table('study_guides',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('subject', sa.String(length=100), nullable=False),
        sa.Column('grade_level', sa.String(length=50), nullable=False),
        sa.Column('format', postgresql.ENUM(name='guide_format', create_type=False), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('topic_focus', sa.String(length=255), nullable=True),
        sa.Column('difficulty_level', sa.String(length=50), nullable=True),
        sa.Column('class_name', sa.String(length=255), nullable=True),
        sa.Column('file_count', sa.Integer(), server_default=sa.text('0'), nullable=True),
        sa.Column('custom_content', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('is_published', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('published_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['user_profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )

    # Create grading_results table
    op.create_table('grading_results',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('student_user_id', sa.String(length=36), nullable=True),
        sa.Column('student_name', sa.String(length=255), nullable=False),
        sa.Column('student_first_name', sa.String(length=100), nullable=True),
        sa.Column('student_last_name', sa.String(length=100), nullable=True),
        sa.Column('exam_title', sa.String(length=255), nullable=True),
        sa.Column('class_name', sa.String(length=255), nullable=True),
        sa.Column('class_period', sa.String(length=50), nullable=True),
        sa.Column('answer_sheet_filename', sa.String(length=500), nullable=True),
        sa.Column('student_exam_filename', sa.String(length=500), nullable=True),
        sa.Column('total_marks', sa.Integer(), nullable=False),
        sa.Column('total_possible_marks', sa.Integer(), nullable=False),
        sa.Column('percentage', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('grade', sa.String(length=2), nullable=False),
        sa.Column('content', sa.Text(), server_default='', nullable=True),
        sa.Column('grade_breakdown', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('additional_comments', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['user_profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['student_user_id'], ['user_profiles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('total_marks >= 0 AND total_marks <= total_possible_marks', name='ck_grading_results_marks'),
        sa.CheckConstraint('total_possible_marks > 0', name='ck_grading_results_possible_marks')
    )

    # Create indexes
    op.create_index('idx_user_profiles_email', 'user_profiles', ['email'])
    op.create_index('idx_user_profiles_user_type', 'user_profiles', ['user_type'])
    op.create_index('idx_teacher_follows_follower_id', 'teacher_follows', ['follower_id'])
    op.create_index('idx_teacher_follows_teacher_id', 'teacher_follows', ['teacher_id'])
    op.create_index('idx_student_classes_student_id', 'student_classes', ['student_id'])
    op.create_index('idx_student_classes_teacher_id', 'student_classes', ['teacher_id'])
    op.create_index('idx_student_classes_class_name', 'student_classes', ['class_name'])
    op.create_index('idx_study_guides_user_id', 'study_guides', ['user_id'])
    op.create_index('idx_study_guides_published', 'study_guides', ['is_published', 'published_at'])
    op.create_index('idx_grading_results_user_id', 'grading_results', ['user_id'])
    op.create_index('idx_grading_results_student_user_id', 'grading_results', ['student_user_id'])
    op.create_index('idx_grading_results_student_last_name', 'grading_results', ['student_last_name'])
    op.create_index('idx_grading_results_exam_title', 'grading_results', ['exam_title'])
    op.create_index('idx_grading_results_class_name', 'grading_results', ['class_name'])
    op.create_index('idx_grading_results_grade', 'grading_results', ['grade'])


def downgrade() -> None:
    # Drop indexes
    op.drop_index('idx_grading_results_grade', table_name='grading_results')
    op.drop_index('idx_grading_results_class_name', table_name='grading_results')
    op.drop_index('idx_grading_results_exam_title', table_name='grading_results')
    op.drop_index('idx_grading_results_student_last_name', table_name='grading_results')
    op.drop_index('idx_grading_results_student_user_id', table_name='grading_results')
    op.drop_index('idx_grading_results_user_id', table_name='grading_results')
    op.drop_index('idx_study_guides_published', table_name='study_guides')
    op.drop_index('idx_study_guides_user_id', table_name='study_guides')
    op.drop_index('idx_student_classes_class_name', table_name='student_classes')
    op.drop_index('idx_student_classes_teacher_id', table_name='student_classes')
    op.drop_index('idx_student_classes_student_id', table_name='student_classes')
    op.drop_index('idx_teacher_follows_teacher_id', table_name='teacher_follows')
    op.drop_index('idx_teacher_follows_follower_id', table_name='teacher_follows')
    op.drop_index('idx_user_profiles_user_type', table_name='user_profiles')
    op.drop_index('idx_user_profiles_email', table_name='user_profiles')

    # Drop tables
    op.drop_table('grading_results')
    op.drop_table('study_guides')
    op.drop_table('student_classes')
    op.drop_table('teacher_follows')
    op.drop_table('user_profiles')

    # Drop custom types
    op.execute('DROP TYPE IF EXISTS guide_format')
    op.execute('DROP TYPE IF EXISTS user_type')
