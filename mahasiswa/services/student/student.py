import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from mahasiswa.core.exceptions import (
    BadRequestException,
    DuplicateNimException,
    StudentNotFoundException,
)
from mahasiswa.models.student import Student
from mahasiswa.schemas.student import StudentCreate, StudentUpdate

logger = logging.getLogger(__name__)

# Wire column name -> ORM attribute allowed in ORDER BY
SORT_COLUMNS = {
    "Nim": Student.nim,
    "Name": Student.name,
    "BirthDate": Student.birth_date,
}


def get_student(db: Session, nim: str) -> Optional[Student]:
    """Fetch one student by NIM"""
    return db.query(Student).filter(Student.nim == nim).first()


def get_students(db: Session, order: str = "Name", ascending: bool = True) -> List[Student]:
    """All students, ordered by one column"""
    column = SORT_COLUMNS.get(order)
    if column is None:
        raise BadRequestException(
            f"Cannot order by '{order}'",
            details={"allowed": sorted(SORT_COLUMNS)}
        )
    ordering = column.asc() if ascending else column.desc()
    # NIM breaks ties so equal names keep a stable order between loads
    return db.query(Student).order_by(ordering, Student.nim.asc()).all()


def create_students(db: Session, students: List[StudentCreate]) -> List[Student]:
    """Insert a batch of students; all or nothing"""
    if not students:
        raise BadRequestException("Insert batch is empty")

    seen = set()
    for student in students:
        if student.nim in seen or get_student(db, student.nim):
            raise DuplicateNimException(student.nim)
        seen.add(student.nim)

    db_students = [
        Student(
            nim=student.nim,
            name=student.name,
            gender=student.gender.value,
            birth_date=student.birth_date,
            address=student.address,
            contact=student.contact,
            status=student.status,
        )
        for student in students
    ]
    db.add_all(db_students)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        # Lost a race with a concurrent insert of the same NIM
        raise DuplicateNimException(", ".join(s.nim for s in students))

    for db_student in db_students:
        db.refresh(db_student)
    logger.info(f"Inserted {len(db_students)} student(s): {[s.nim for s in db_students]}")
    return db_students


def update_student(db: Session, nim: str, student: StudentUpdate) -> Student:
    """Replace every field of the student keyed by NIM"""
    if student.nim != nim:
        raise BadRequestException(
            "NIM cannot be changed",
            details={"key": nim, "Nim": student.nim}
        )

    db_student = get_student(db, nim)
    if db_student is None:
        raise StudentNotFoundException(nim)

    db_student.name = student.name
    db_student.gender = student.gender.value
    db_student.birth_date = student.birth_date
    db_student.address = student.address
    db_student.contact = student.contact
    db_student.status = student.status
    db.commit()
    db.refresh(db_student)
    logger.info(f"Updated student {nim}")
    return db_student


def delete_student(db: Session, nim: str) -> Student:
    """Delete the student keyed by NIM"""
    db_student = get_student(db, nim)
    if db_student is None:
        raise StudentNotFoundException(nim)
    db.delete(db_student)
    db.commit()
    logger.info(f"Deleted student {nim}")
    return db_student
