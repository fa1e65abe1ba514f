"""
Constraint violations surfaced by the storage boundary.
"""

from typing import Optional

from sqlalchemy.exc import IntegrityError


class CatalogError(Exception):
    """Base class for catalog errors."""

    def __init__(self, detail: str, entity: Optional[str] = None, field: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.entity = entity
        self.field = field


class NotFoundError(CatalogError):
    def __init__(self, detail: str = "Resource not found", entity: Optional[str] = None):
        super().__init__(detail, entity=entity)


class ConstraintViolation(CatalogError):
    """A write was refused because it breaks a declared constraint."""


class RequiredFieldMissing(ConstraintViolation):
    def __init__(self, field: str, entity: Optional[str] = None):
        super().__init__(f"{entity or 'entity'}.{field} is required", entity=entity, field=field)


class FieldTooLong(ConstraintViolation):
    def __init__(self, field: str, max_length: int, actual: int, entity: Optional[str] = None):
        super().__init__(
            f"{entity or 'entity'}.{field} exceeds {max_length} (got {actual})",
            entity=entity,
            field=field,
        )
        self.max_length = max_length
        self.actual = actual


class UniquenessViolation(ConstraintViolation):
    def __init__(self, field: Optional[str] = None, value: object = None, entity: Optional[str] = None):
        if field is None:
            detail = f"duplicate {entity or 'entity'}"
        elif value is None:
            detail = f"{entity or 'entity'}.{field} already exists"
        else:
            detail = f"{entity or 'entity'}.{field} {value!r} already exists"
        super().__init__(detail, entity=entity, field=field)
        self.value = value


class ReferentialIntegrityViolation(ConstraintViolation):
    def __init__(self, detail: str, entity: Optional[str] = None, field: Optional[str] = None):
        super().__init__(detail, entity=entity, field=field)


def translate_integrity_error(exc: IntegrityError, entity: Optional[str] = None) -> ConstraintViolation:
    """
    Map a driver integrity error to the matching violation kind.

    Postgres (asyncpg) and SQLite word their messages differently; both are
    matched on the lower-cased text of the original driver exception.
    """
    message = str(exc.orig if exc.orig is not None else exc).lower()

    if "unique" in message or "duplicate key" in message:
        return UniquenessViolation(_failed_column(message), entity=entity)
    if "foreign key" in message:
        return ReferentialIntegrityViolation(message, entity=entity)
    if "not null" in message or "null value" in message:
        return RequiredFieldMissing(_failed_column(message) or "unknown", entity=entity)
    return ConstraintViolation(message, entity=entity)


def _failed_column(message: str) -> Optional[str]:
    # sqlite: "not null constraint failed: item.category_id"
    # sqlite: "unique constraint failed: item.stock_keeping_unit"
    # postgres: 'null value in column "category_id" of relation "item" ...'
    if "constraint failed:" in message:
        return message.rsplit(".", 1)[-1].strip()
    if 'column "' in message:
        return message.split('column "', 1)[1].split('"', 1)[0]
    return None
