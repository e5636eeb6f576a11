"""Per-user key/value property model."""

from sqlalchemy import Integer, String, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.db.database import Base


class UserPropertyRecord(Base):
    """A single persisted user attribute, e.g. ``login_count`` or ``location``.

    Values are stored as text; numeric properties are cast at query time.
    """

    __tablename__ = "user_property"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        primary_key=True,
    )
    prop_name: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        index=True,
    )
    prop_value: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<UserPropertyRecord {self.user_id}:{self.prop_name}={self.prop_value!r}>"
