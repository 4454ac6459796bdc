from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Index, func, text
from app.core.database import Base


class CvLibraryEntry(Base):
    """
    A CV saved to the library for later optimization runs.

    Like job postings, at most one entry is active at a time.
    """
    __tablename__ = "cv_library"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    file_name = Column(String, nullable=False)
    cv_text = Column(Text, nullable=False)
    is_active = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index(
            "uq_cv_library_single_active",
            "is_active",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active"),
        ),
    )

    def __repr__(self):
        return f"<CvLibraryEntry(id={self.id}, name='{self.name}', active={self.is_active})>"
