"""Row lookups shared by the services."""

from typing import TypeVar

from sqlalchemy.orm import Session

from mundamanager.exceptions import NotFoundError

T = TypeVar("T")


def get_or_raise(session: Session, model: type[T], pk: object, label: str | None = None) -> T:
    """Fetch a row by primary key.

    Raises:
        NotFoundError: If no row has that key
    """
    row = session.get(model, pk)
    if row is None:
        raise NotFoundError(f"{label or model.__name__} {pk} not found")
    return row
