"""ORM model for roles: named bundles of permission strings."""

from sqlalchemy import JSON, Boolean, CheckConstraint, Column, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import validates

from app.models.base import Base, TimestampMixin

# Slug of the seeded system administrator role.
ADMIN_ROLE_SLUG = "admin"


class Role(TimestampMixin, Base):
    """
    Role assignable to users.

    permissions holds permission strings from the registry, stored as a sorted
    list with set semantics. is_system_admin is true exactly when slug is
    'admin': that role passes every permission check and can never be deleted.
    """

    __tablename__ = "roles"
    __table_args__ = (
        CheckConstraint(
            f"is_system_admin = (slug = '{ADMIN_ROLE_SLUG}')",
            name="ck_roles_admin_flag_matches_slug",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True, index=True)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    permissions = Column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=list,
    )
    is_system_admin = Column(Boolean, nullable=False, default=False)

    @validates("slug")
    def _sync_admin_flag(self, key: str, value: str) -> str:
        # Flag follows slug; the check constraint rejects any other pairing.
        self.is_system_admin = value == ADMIN_ROLE_SLUG
        return value

    def __repr__(self) -> str:
        return f"<Role id={self.id} slug={self.slug!r}>"
