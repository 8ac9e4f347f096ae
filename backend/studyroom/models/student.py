# backend/studyroom/models/student.py
"""
Student model.

A student is identified by the (name, class identifier) pair and is created
lazily the first time a booking references it.
"""

from sqlalchemy import Column, DateTime, String, UniqueConstraint
from sqlalchemy.sql import func
import ulid

from studyroom.database import Base


class Student(Base):
    __tablename__ = "students"
    __table_args__ = (
        UniqueConstraint("name", "class_identifier", name="uq_students_name_class"),
    )

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    name = Column(String(100), nullable=False)
    class_identifier = Column(String(20), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"<Student {self.name} ({self.class_identifier})>"
