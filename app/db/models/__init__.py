"""Model module imports for SQLAlchemy metadata registration."""

from app.db.models.user import User
from app.db.models.widget import Base
from app.db.models.widget import Widget

__all__ = [
    "Base",
    "User",
    "Widget",
]
