"""create allocations and activity logs

Revision ID: 20261019_0002
Revises: 20261019_0001
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0002"
down_revision = "20261019_0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "allocations",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("teacher_id", sa.String(length=36), sa.ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("course_id", sa.String(length=36), sa.ForeignKey("courses.id", ondelete="CASCADE"), nullable=False),
        sa.Column("room_id", sa.String(length=36), sa.ForeignKey("rooms.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("day_id", sa.Integer(), sa.ForeignKey("days.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("slot_id", sa.Integer(), sa.ForeignKey("time_slots.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("program", sa.String(length=20), nullable=False),
        sa.Column("section", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("room_id", "day_id", "slot_id", name="uq_allocations_room_day_slot"),
        sa.UniqueConstraint("teacher_id", "day_id", "slot_id", name="uq_allocations_teacher_day_slot"),
        sa.CheckConstraint("section >= 1", name="ck_allocations_section_positive"),
    )
    op.create_index("ix_allocations_teacher_id", "allocations", ["teacher_id"], unique=False)
    op.create_index("ix_allocations_course_id", "allocations", ["course_id"], unique=False)
    op.create_index("ix_allocations_program", "allocations", ["program"], unique=False)

    op.create_table(
        "activity_logs",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("actor", sa.String(length=200), nullable=True),
        sa.Column("action", sa.String(length=100), nullable=False),
        sa.Column("entity_type", sa.String(length=100), nullable=True),
        sa.Column("entity_id", sa.String(length=100), nullable=True),
        sa.Column("details", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_activity_logs_entity", "activity_logs", ["entity_type", "entity_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_activity_logs_entity", table_name="activity_logs")
    op.drop_table("activity_logs")
    op.drop_index("ix_allocations_program", table_name="allocations")
    op.drop_index("ix_allocations_course_id", table_name="allocations")
    op.drop_index("ix_allocations_teacher_id", table_name="allocations")
    op.drop_table("allocations")
