from sqlalchemy import Boolean, CheckConstraint, Column, Date, String, Text
from mahasiswa.core.config import settings
from mahasiswa.core.database import Base


class Student(Base):
    __tablename__ = settings.STUDENT_COLLECTION
    __table_args__ = (
        CheckConstraint("\"Gender\" IN ('L', 'P')", name="ck_mahasiswa_gender"),
    )

    # Column names are the wire names of the collection
    nim = Column("Nim", String(32), primary_key=True, index=True)
    name = Column("Name", String(255), nullable=False, index=True)
    gender = Column("Gender", String(1), nullable=False, default="L")
    birth_date = Column("BirthDate", Date, nullable=False)
    address = Column("Address", Text, nullable=False, default="")
    contact = Column("Contact", String(64), nullable=False, default="")
    status = Column("Status", Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<Student(nim='{self.nim}', name='{self.name}')>"
