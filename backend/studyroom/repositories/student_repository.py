"""Student data access."""

from typing import Optional

from sqlalchemy.orm import Session

from studyroom.models.student import Student
from studyroom.repositories.base_repository import BaseRepository


class StudentRepository(BaseRepository[Student]):
    def __init__(self, db: Session):
        super().__init__(db, Student)

    def find_by_identity(self, name: str, class_identifier: str) -> Optional[Student]:
        """Exact, case-sensitive match on the (name, class) pair."""
        return self.find_one_by(name=name, class_identifier=class_identifier)
