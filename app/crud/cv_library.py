"""
CRUD operations for the CV library.
"""

from typing import List, Optional
from sqlalchemy.orm import Session
from app.crud.activation import activate_exclusive
from app.models.cv_library import CvLibraryEntry


def create(db: Session, name: str, file_name: str, cv_text: str) -> CvLibraryEntry:
    """Save a CV to the library. New entries start inactive."""
    entry = CvLibraryEntry(
        name=name,
        file_name=file_name,
        cv_text=cv_text,
        is_active=False
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


def get_by_id(db: Session, entry_id: int) -> Optional[CvLibraryEntry]:
    return db.query(CvLibraryEntry).filter(CvLibraryEntry.id == entry_id).first()


def get_multi(db: Session) -> List[CvLibraryEntry]:
    """All library entries, newest first."""
    return (
        db.query(CvLibraryEntry)
        .order_by(CvLibraryEntry.created_at.desc(), CvLibraryEntry.id.desc())
        .all()
    )


def activate(db: Session, entry_id: int) -> Optional[CvLibraryEntry]:
    """
    Make an entry the active CV.

    Returns:
        The activated entry, or None if it does not exist
    """
    entry = get_by_id(db, entry_id)
    if not entry:
        return None

    activate_exclusive(db, entry)
    return entry


def delete(db: Session, entry_id: int) -> bool:
    """
    Remove an entry. Optimizations that used it keep their copy of the text.

    Returns:
        True if deleted, False if not found
    """
    entry = get_by_id(db, entry_id)
    if not entry:
        return False

    db.delete(entry)
    db.commit()
    return True
