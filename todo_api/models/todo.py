"""Todo model."""

from sqlalchemy import Boolean, Column, ForeignKey, String, false
from sqlalchemy.orm import relationship

from todo_api.database import Base
from todo_api.models.mixins import TimestampMixin, UUIDPrimaryKeyMixin


class Todo(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A todo item owned by exactly one user."""

    __tablename__ = "todos"

    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    completed = Column(Boolean, default=False, server_default=false(), nullable=False, index=True)

    # Relationships
    owner = relationship("User", back_populates="todos")

    def belongs_to(self, user_id: str) -> bool:
        """Check whether the given user owns this todo."""
        return self.user_id == user_id
