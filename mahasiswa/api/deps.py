from typing import Generator
from mahasiswa.core.database import SessionLocal


def get_db() -> Generator:
    """
    Database session dependency.
    The session is closed once the request finishes.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
