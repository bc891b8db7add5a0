"""create conflict engine tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from alembic import op
import sqlalchemy as sa

revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None

GROUP_TYPES = ("regular", "joint", "split")
LESSON_TYPES = ("lecture", "tutorial", "lab", "workshop", "exam", "seminar", "meeting", "other")
CONFLICT_TYPES = ("room", "faculty", "student_group", "time", "capacity")
CONFLICT_SEVERITIES = ("high", "warning")


def upgrade() -> None:
    op.create_table(
        "rooms",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_rooms_name", "rooms", ["name"], unique=True)

    op.create_table(
        "faculty",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("department_id", sa.String(length=36), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "courses",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("department_id", sa.String(length=36), nullable=True),
        sa.Column("year_level", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_courses_code", "courses", ["code"], unique=True)

    op.create_table(
        "time_slots",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("course_id", sa.String(length=36), nullable=False),
        sa.Column("faculty_id", sa.String(length=36), nullable=False),
        sa.Column("room_id", sa.String(length=36), nullable=False),
        sa.Column("department_id", sa.String(length=36), nullable=True),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.Column("year_level", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("academic_year", sa.String(length=20), nullable=False),
        sa.Column("semester", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("type", sa.Enum(*LESSON_TYPES, name="lesson_type"), nullable=False),
        sa.Column("group_id", sa.String(length=64), nullable=True),
        sa.Column("group_type", sa.Enum(*GROUP_TYPES, name="group_type"), nullable=True),
        sa.Column("group_name", sa.String(length=100), nullable=True),
        sa.Column("max_students", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_time_slots_course_id", "time_slots", ["course_id"])
    op.create_index("ix_time_slots_faculty_id", "time_slots", ["faculty_id"])
    op.create_index("ix_time_slots_room_id", "time_slots", ["room_id"])
    op.create_index("ix_time_slots_group_id", "time_slots", ["group_id"])
    op.create_index("ix_time_slots_scope", "time_slots", ["academic_year", "semester", "day_of_week"])

    op.create_table(
        "conflicts",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("academic_year", sa.String(length=20), nullable=False),
        sa.Column("semester", sa.Integer(), nullable=False),
        sa.Column("type", sa.Enum(*CONFLICT_TYPES, name="conflict_type"), nullable=False),
        sa.Column("severity", sa.Enum(*CONFLICT_SEVERITIES, name="conflict_severity"), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("details", sa.Text(), nullable=False, server_default=""),
        sa.Column("affected_slots", sa.JSON(), nullable=False),
        sa.Column("resolved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("resolved_by", sa.String(length=36), nullable=True),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("resolution_notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_conflicts_academic_year", "conflicts", ["academic_year"])


def downgrade() -> None:
    op.drop_index("ix_conflicts_academic_year", table_name="conflicts")
    op.drop_table("conflicts")
    op.drop_index("ix_time_slots_scope", table_name="time_slots")
    op.drop_index("ix_time_slots_group_id", table_name="time_slots")
    op.drop_index("ix_time_slots_room_id", table_name="time_slots")
    op.drop_index("ix_time_slots_faculty_id", table_name="time_slots")
    op.drop_index("ix_time_slots_course_id", table_name="time_slots")
    op.drop_table("time_slots")
    op.drop_index("ix_courses_code", table_name="courses")
    op.drop_table("courses")
    op.drop_table("faculty")
    op.drop_index("ix_rooms_name", table_name="rooms")
    op.drop_table("rooms")
