from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List
from mahasiswa.api.deps import get_db
from mahasiswa.core.exceptions import StudentNotFoundException
from mahasiswa.services.student import student as crud_student
from mahasiswa.schemas.student import Student, StudentCreate, StudentUpdate

router = APIRouter()


@router.get("/", response_model=List[Student])
def get_students(
    order: str = "Name",
    ascending: bool = True,
    db: Session = Depends(get_db)
):
    """
    List every student in the collection

    - **order**: column to sort by (Nim, Name, BirthDate; default Name)
    - **ascending**: sort direction (default true)
    """
    return crud_student.get_students(db, order=order, ascending=ascending)


@router.get("/{nim}", response_model=Student)
def get_student(
    nim: str,
    db: Session = Depends(get_db)
):
    """
    Details of one student by NIM
    """
    student = crud_student.get_student(db, nim=nim)
    if not student:
        raise StudentNotFoundException(nim)
    return student


@router.post("/", response_model=List[Student], status_code=status.HTTP_201_CREATED)
def create_students(
    students: List[StudentCreate],
    db: Session = Depends(get_db)
):
    """
    Insert a batch of students

    The body is a JSON list; the page always sends a one-element batch.
    Every NIM must be new, otherwise nothing is inserted (409).
    """
    return crud_student.create_students(db=db, students=students)


@router.put("/{nim}", response_model=Student)
def update_student(
    nim: str,
    student: StudentUpdate,
    db: Session = Depends(get_db)
):
    """
    Replace a student's data. The NIM in the body must equal the NIM in the path.
    """
    return crud_student.update_student(db=db, nim=nim, student=student)


@router.delete("/{nim}", status_code=status.HTTP_204_NO_CONTENT)
def delete_student(
    nim: str,
    db: Session = Depends(get_db)
):
    """
    Delete a student
    """
    crud_student.delete_student(db=db, nim=nim)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
