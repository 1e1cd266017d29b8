from sqlalchemy.orm import Session
from cueleague.core.database import SessionLocal
from cueleague.core.security import get_current_organizer  # noqa: F401

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
