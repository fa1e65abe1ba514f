"""
Declarative field rules and the write-time check that enforces them.

Entities never validate themselves. The rules are read from the mapped
table, so column definitions stay the single source of truth for lengths,
nullability and uniqueness.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Tuple, Type

from sqlalchemy import Numeric, String, inspect
from sqlalchemy.orm import RelationshipDirection

from catalog.core.exceptions import ConstraintViolation, FieldTooLong, RequiredFieldMissing
from catalog.db.session import Base


@dataclass(frozen=True)
class FieldRule:
    """Constraint metadata for one entity attribute."""

    name: str
    max_length: Optional[int] = None
    required: bool = False
    unique: bool = False
    precision: Optional[int] = None
    scale: Optional[int] = None


def field_rules(model: Type[Base]) -> Tuple[FieldRule, ...]:
    """Return the rules for every column attribute of ``model``, in column order."""
    mapper = inspect(model)
    rules = []
    for prop in mapper.column_attrs:
        column = prop.columns[0]
        column_type = column.type
        rules.append(
            FieldRule(
                name=prop.key,
                max_length=getattr(column_type, "length", None) if isinstance(column_type, String) else None,
                # generated primary keys are not the caller's to supply
                required=not column.nullable and not column.primary_key,
                unique=bool(column.unique),
                precision=column_type.precision if isinstance(column_type, Numeric) else None,
                scale=column_type.scale if isinstance(column_type, Numeric) else None,
            )
        )
    return tuple(rules)


def _decimal_violation(rule: FieldRule, value: Decimal, entity: str) -> Optional[ConstraintViolation]:
    if not value.is_finite():
        return ConstraintViolation(f"{entity}.{rule.name} must be a finite number", entity=entity, field=rule.name)

    _, digits, exponent = value.normalize().as_tuple()
    fraction_digits = max(0, -exponent)
    integer_digits = max(0, len(digits) + exponent)

    if rule.scale is not None and fraction_digits > rule.scale:
        return FieldTooLong(rule.name, rule.scale, fraction_digits, entity=entity)
    if rule.precision is not None and integer_digits > rule.precision - (rule.scale or 0):
        return FieldTooLong(rule.name, rule.precision - (rule.scale or 0), integer_digits, entity=entity)
    return None


def check_entity(entity: Base) -> List[ConstraintViolation]:
    """
    Collect every constraint violation on ``entity`` without raising.

    Uniqueness needs the database and is checked by the services.
    """
    mapper = inspect(type(entity))
    entity_name = mapper.local_table.name
    violations: List[ConstraintViolation] = []

    for rule in field_rules(type(entity)):
        value = getattr(entity, rule.name)

        if value is None:
            if rule.required and not _resolved_by_relationship(entity, rule.name):
                violations.append(RequiredFieldMissing(rule.name, entity=entity_name))
            continue

        if rule.max_length is not None and isinstance(value, str) and len(value) > rule.max_length:
            violations.append(FieldTooLong(rule.name, rule.max_length, len(value), entity=entity_name))
        elif isinstance(value, Decimal):
            violation = _decimal_violation(rule, value, entity_name)
            if violation is not None:
                violations.append(violation)

    return violations


def validate_entity(entity: Base) -> None:
    """Raise the first violation found on ``entity``."""
    violations = check_entity(entity)
    if violations:
        raise violations[0]


def _resolved_by_relationship(entity: Base, column_key: str) -> bool:
    """
    True when an assigned many-to-one relationship will fill ``column_key``
    at flush. Reads attribute history only, so nothing is loaded.
    """
    state = inspect(entity)
    for rel in state.mapper.relationships:
        if rel.direction is not RelationshipDirection.MANYTOONE:
            continue
        if not any(col.key == column_key for col in rel.local_columns):
            continue
        if any(obj is not None for obj in state.attrs[rel.key].history.added):
            return True
    return False

