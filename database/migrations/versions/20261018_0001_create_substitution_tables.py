"""create substitution tables

Revision ID: 20261018_0001
Revises: None
Create Date: 2026-10-18 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "teacher_attendance",
        sa.Column("teacher_id", sa.String(length=50), primary_key=True, nullable=False),
        sa.Column("teacher_name", sa.String(length=200), nullable=True),
        sa.Column("attendance", sa.String(length=50), nullable=True),
    )
    op.create_table(
        "time_slots",
        sa.Column("slot_id", sa.Integer(), primary_key=True, autoincrement=False, nullable=False),
        sa.Column("time_range", sa.String(length=50), nullable=False),
    )
    op.create_table(
        "teacher_timetable",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("teacher_id", sa.String(length=50), nullable=False),
        sa.Column("day_of_week", sa.String(length=10), nullable=False),
        sa.Column("slot_id", sa.Integer(), sa.ForeignKey("time_slots.slot_id"), nullable=False),
        sa.Column("activity_description", sa.Text(), nullable=True),
        sa.Column("room_location", sa.String(length=100), nullable=True),
        sa.Column("is_free", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.UniqueConstraint("teacher_id", "day_of_week", "slot_id", name="uq_teacher_timetable_slot"),
    )
    op.create_index("ix_teacher_timetable_teacher_id", "teacher_timetable", ["teacher_id"])
    op.create_index("ix_teacher_timetable_day_of_week", "teacher_timetable", ["day_of_week"])
    op.create_table(
        "subjects",
        sa.Column("subject_code", sa.String(length=50), primary_key=True, nullable=False),
        sa.Column("subject_name", sa.String(length=200), nullable=True),
    )
    op.create_table(
        "teacher_subject_assignment",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("teacher_id", sa.String(length=50), nullable=False),
        sa.Column("subject_code", sa.String(length=50), nullable=False),
        sa.UniqueConstraint("teacher_id", "subject_code", name="uq_teacher_subject_assignment"),
    )
    op.create_index("ix_teacher_subject_assignment_teacher_id", "teacher_subject_assignment", ["teacher_id"])


def downgrade() -> None:
    op.drop_index("ix_teacher_subject_assignment_teacher_id", table_name="teacher_subject_assignment")
    op.drop_table("teacher_subject_assignment")
    op.drop_table("subjects")
    op.drop_index("ix_teacher_timetable_day_of_week", table_name="teacher_timetable")
    op.drop_index("ix_teacher_timetable_teacher_id", table_name="teacher_timetable")
    op.drop_table("teacher_timetable")
    op.drop_table("time_slots")
    op.drop_table("teacher_attendance")
