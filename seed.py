import logging
from datetime import date

from mahasiswa.core.database import SessionLocal, create_database_tables
from mahasiswa.models.student import Student

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def seed_data():
    """
    Insert a few sample students when the Mahasiswa table is empty.
    """
    create_database_tables()
    db = SessionLocal()
    try:
        if db.query(Student).first():
            logger.info("Database already contains data. Skipping seed.")
            return

        logger.info("Seeding data...")

        students = [
            Student(
                nim="2201001",
                name="Andi Saputra",
                gender="L",
                birth_date=date(2003, 4, 12),
                address="Jl. Merdeka No. 10, Bandung",
                contact="081234567890",
                status=True,
            ),
            Student(
                nim="2201002",
                name="Siti Rahmawati",
                gender="P",
                birth_date=date(2003, 8, 17),
                address="Jl. Sudirman No. 5, Jakarta",
                contact="082198765432",
                status=True,
            ),
            Student(
                nim="2101015",
                name="Budi Santoso",
                gender="L",
                birth_date=date(2002, 1, 30),
                address="",
                contact="",
                status=False,
            ),
        ]

        db.add_all(students)
        db.commit()

        logger.info("✅ Data seeded successfully!")

    except Exception as e:
        logger.error(f"❌ Error seeding data: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_data()
