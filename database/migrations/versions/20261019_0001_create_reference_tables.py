"""create reference tables

Revision ID: 20261019_0001
Revises: None
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


class_type_enum = postgresql.ENUM("theory", "lab", name="class_type", create_type=False)


def upgrade() -> None:
    class_type_enum.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "programs",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("code", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("sections", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("sections >= 1", name="ck_programs_sections_positive"),
    )
    op.create_index("ix_programs_code", "programs", ["code"], unique=True)

    op.create_table(
        "teachers",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_teachers_email", "teachers", ["email"], unique=True)

    op.create_table(
        "courses",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("credit_hours", sa.Float(), nullable=False, server_default="3.0"),
        sa.Column(
            "program",
            sa.String(length=20),
            sa.ForeignKey("programs.code", onupdate="CASCADE"),
            nullable=False,
        ),
        sa.Column("type", class_type_enum, nullable=False),
        sa.Column("allocation_capacity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("allocation_availability", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("allocation_availability >= 0", name="ck_courses_availability_non_negative"),
    )
    op.create_index("ix_courses_code", "courses", ["code"], unique=True)
    op.create_index("ix_courses_program", "courses", ["program"], unique=False)

    op.create_table(
        "rooms",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("room_number", sa.String(length=50), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False, server_default="40"),
        sa.Column("is_lab", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_rooms_room_number", "rooms", ["room_number"], unique=True)

    op.create_table(
        "days",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=20), nullable=False, unique=True),
        sa.Column("day_order", sa.Integer(), nullable=False, unique=True),
    )

    op.create_table(
        "time_slots",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("slot_type", class_type_enum, nullable=False),
        sa.Column("slot_order", sa.Integer(), nullable=False, unique=True),
        sa.CheckConstraint("end_time > start_time", name="ck_time_slots_ordered"),
    )


def downgrade() -> None:
    op.drop_table("time_slots")
    op.drop_table("days")
    op.drop_index("ix_rooms_room_number", table_name="rooms")
    op.drop_table("rooms")
    op.drop_index("ix_courses_program", table_name="courses")
    op.drop_index("ix_courses_code", table_name="courses")
    op.drop_table("courses")
    op.drop_index("ix_teachers_email", table_name="teachers")
    op.drop_table("teachers")
    op.drop_index("ix_programs_code", table_name="programs")
    op.drop_table("programs")
    class_type_enum.drop(op.get_bind(), checkfirst=True)
