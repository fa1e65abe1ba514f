"""
Shared timestamp behavior for catalog entities.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Optional

from sqlalchemy import Column, DateTime, event, inspect

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """
    Stamps ``last_updated`` when an entity is constructed.

    Instances loaded from the database skip ``__init__`` and keep their
    stored value.
    """

    last_updated = Column("updated_at", DateTime(timezone=True), nullable=False)

    def __init__(self, *, clock: Optional[Clock] = None, **kwargs: Any) -> None:
        if kwargs.get("last_updated") is None:
            kwargs["last_updated"] = (clock or utcnow)()
        super().__init__(**kwargs)

    def touch(self, clock: Optional[Clock] = None) -> None:
        """Refresh ``last_updated`` in memory."""
        self.last_updated = (clock or utcnow)()


@event.listens_for(TimestampMixin, "before_update", propagate=True)
def refresh_last_updated(mapper, connection, target):
    """
    Refresh ``last_updated`` on every flushed change.

    An explicit assignment to ``last_updated`` in the same unit of work wins.
    """
    state = inspect(target)
    if state.attrs.last_updated.history.has_changes():
        return

    changed = any(state.attrs[prop.key].history.has_changes() for prop in mapper.column_attrs)
    if changed:
        target.last_updated = utcnow()
