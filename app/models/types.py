"""
Column types shared by the models.

JSON columns use JSONB on PostgreSQL and plain JSON elsewhere (SQLite in tests).
"""

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB

JSONType = JSON().with_variant(JSONB(), "postgresql")
