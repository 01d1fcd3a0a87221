"""create groups, students, grades and performance prediction tables

Revision ID: a1c3e5f70001
Revises: 
Create Date: 2026-10-19 09:12:41.502113

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1c3e5f70001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'groups',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('group_name', sa.String(length=50), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_groups_id'), 'groups', ['id'], unique=False)
    op.create_index(op.f('ix_groups_group_name'), 'groups', ['group_name'], unique=True)
    op.create_index(op.f('ix_groups_created_at'), 'groups', ['created_at'], unique=False)

    op.create_table(
        'students',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('full_name', sa.String(length=200), nullable=False),
        sa.Column('group_id', sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['group_id'], ['groups.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_students_id'), 'students', ['id'], unique=False)
    op.create_index(op.f('ix_students_group_id'), 'students', ['group_id'], unique=False)
    op.create_index(op.f('ix_students_created_at'), 'students', ['created_at'], unique=False)

    op.create_table(
        'exams',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('exam_name', sa.String(length=200), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_exams_id'), 'exams', ['id'], unique=False)
    op.create_index(op.f('ix_exams_created_at'), 'exams', ['created_at'], unique=False)

    op.create_table(
        'credits',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('credit_name', sa.String(length=200), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_credits_id'), 'credits', ['id'], unique=False)
    op.create_index(op.f('ix_credits_created_at'), 'credits', ['created_at'], unique=False)

    op.create_table(
        'exam_grades',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('student_id', sa.Uuid(), nullable=False),
        sa.Column('exam_id', sa.Uuid(), nullable=False),
        sa.Column('grade', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('grade BETWEEN 2 AND 5', name='ck_exam_grade_range'),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['exam_id'], ['exams.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('student_id', 'exam_id', name='uq_exam_grade_student_exam'),
    )
    op.create_index(op.f('ix_exam_grades_id'), 'exam_grades', ['id'], unique=False)
    op.create_index(op.f('ix_exam_grades_student_id'), 'exam_grades', ['student_id'], unique=False)
    op.create_index(op.f('ix_exam_grades_created_at'), 'exam_grades', ['created_at'], unique=False)

    op.create_table(
        'credit_results',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('student_id', sa.Uuid(), nullable=False),
        sa.Column('credit_id', sa.Uuid(), nullable=False),
        sa.Column('is_passed', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['credit_id'], ['credits.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('student_id', 'credit_id', name='uq_credit_result_student_credit'),
    )
    op.create_index(op.f('ix_credit_results_id'), 'credit_results', ['id'], unique=False)
    op.create_index(op.f('ix_credit_results_student_id'), 'credit_results', ['student_id'], unique=False)
    op.create_index(op.f('ix_credit_results_created_at'), 'credit_results', ['created_at'], unique=False)

    op.create_table(
        'performance_predictions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('student_id', sa.Uuid(), nullable=False),
        sa.Column('predicted_exam_grade', sa.Numeric(precision=4, scale=2), nullable=True),
        sa.Column('predicted_credit_pass_rate', sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column('overall_performance_score', sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column('prediction_date', sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_performance_predictions_id'), 'performance_predictions', ['id'], unique=False)
    # One current prediction per student
    op.create_index(op.f('ix_performance_predictions_student_id'), 'performance_predictions', ['student_id'], unique=True)
    op.create_index(op.f('ix_performance_predictions_created_at'), 'performance_predictions', ['created_at'], unique=False)


def downgrade() -> None:
    op.drop_table('performance_predictions')
    op.drop_table('credit_results')
    op.drop_table('exam_grades')
    op.drop_table('credits')
    op.drop_table('exams')
    op.drop_table('students')
    op.drop_table('groups')
