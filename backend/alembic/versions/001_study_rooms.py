# backend/alembic/versions/001_study_rooms.py
"""Study rooms, students and reservations

Revision ID: 001_study_rooms
Revises:
Create Date: 2026-02-16 00:00:00.000000

Reservations carry a plain DATE plus integer start/end hours. The unique
(room_id, reservation_date, start_hour) constraint backs up the booking
lock scope against double booking.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_study_rooms"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "study_rooms",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("room_number", sa.String(10), nullable=False),
        sa.Column("floor", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("room_number"),
    )
    op.create_index("ix_study_rooms_id", "study_rooms", ["id"])

    op.create_table(
        "students",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("class_identifier", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", "class_identifier", name="uq_students_name_class"),
    )
    op.create_index("ix_students_id", "students", ["id"])

    op.create_table(
        "reservations",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("room_id", sa.String(26), nullable=False),
        sa.Column("reservation_date", sa.Date(), nullable=False),
        sa.Column("start_hour", sa.Integer(), nullable=False),
        sa.Column("end_hour", sa.Integer(), nullable=False),
        sa.Column("student1_id", sa.String(26), nullable=False),
        sa.Column("student2_id", sa.String(26), nullable=False),
        sa.Column("created_by", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["room_id"], ["study_rooms.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["student1_id"], ["students.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["student2_id"], ["students.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "room_id", "reservation_date", "start_hour", name="uq_reservations_room_date_hour"
        ),
        sa.CheckConstraint(
            "start_hour >= 8 AND start_hour <= 23", name="ck_reservations_start_hour_range"
        ),
        sa.CheckConstraint("end_hour = start_hour + 1", name="ck_reservations_one_hour_slot"),
    )
    op.create_index("ix_reservations_id", "reservations", ["id"])
    op.create_index("ix_reservations_reservation_date", "reservations", ["reservation_date"])
    op.create_index(
        "ix_reservations_date_student1", "reservations", ["reservation_date", "student1_id"]
    )
    op.create_index(
        "ix_reservations_date_student2", "reservations", ["reservation_date", "student2_id"]
    )


def downgrade() -> None:
    op.drop_table("reservations")
    op.drop_table("students")
    op.drop_table("study_rooms")
