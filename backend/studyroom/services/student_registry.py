"""
Student Registry.

Resolves a (name, class identifier) pair to a stable Student row, creating it
on first reference. Concurrent first references may race; the loser of the
insert re-reads the row the winner created.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from studyroom.models.student import Student
from studyroom.repositories import RepositoryFactory
from studyroom.repositories.student_repository import StudentRepository
from studyroom.services.base import BaseService

logger = logging.getLogger(__name__)


class StudentRegistry(BaseService):
    def __init__(self, db: Session, repository: Optional[StudentRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_student_repository(db)

    def resolve(self, name: str, class_identifier: str) -> Student:
        """
        Return the student with this exact identity, inserting it if absent.

        Does not commit; the caller owns the transaction.
        """
        existing = self.repository.find_by_identity(name, class_identifier)
        if existing is not None:
            return existing

        try:
            with self.db.begin_nested():
                student = self.repository.create(name=name, class_identifier=class_identifier)
        except IntegrityError:
            student = self.repository.find_by_identity(name, class_identifier)
            if student is None:
                raise
            self.logger.info(
                "Student created concurrently, reusing existing row",
                extra={"student_id": student.id},
            )
            return student

        self.logger.info(
            "Registered new student",
            extra={"student_id": student.id, "class_identifier": class_identifier},
        )
        return student
