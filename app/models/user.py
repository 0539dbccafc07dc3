"""ORM model for application users (auth and RBAC)."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.models.base import Base, TimestampMixin


class User(TimestampMixin, Base):
    """
    Staff or customer account for JWT authentication and role-based access control.

    role_id may be NULL (role deleted); such a user holds no permissions.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role_id = Column(
        Integer,
        ForeignKey("roles.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    avatar = Column(String(2048), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    role = relationship("Role", lazy="select")

    def __repr__(self) -> str:
        return f"<User id={self.id} role_id={self.role_id}>"
