"""Shared write path for the catalog services."""

from typing import Any, Optional, Type

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.exceptions import ConstraintViolation, UniquenessViolation, translate_integrity_error
from catalog.db.session import Base
from catalog.db.validation import field_rules, validate_entity


class BaseService:
    """Validation, uniqueness checks and commit for one entity type."""

    model: Type[Base]

    def __init__(self, db: AsyncSession):
        """Initialize with database session."""
        self.db = db

    @property
    def entity_name(self) -> str:
        return self.model.__tablename__

    def _validate(self, entity: Base) -> None:
        try:
            validate_entity(entity)
        except ConstraintViolation as e:
            logger.bind(entity=self.entity_name, field=e.field).warning(f"Rejected {self.entity_name}: {e.detail}")
            raise

    async def _check_unique(self, entity: Base, exclude_id: Optional[Any] = None) -> None:
        """Pre-check every unique column of ``entity`` against stored rows."""
        pk = self.model.__mapper__.primary_key[0]
        for rule in field_rules(self.model):
            if not rule.unique:
                continue
            value = getattr(entity, rule.name)
            if value is None:
                continue
            query = select(pk).where(getattr(self.model, rule.name) == value)
            if exclude_id is not None:
                query = query.where(pk != exclude_id)
            result = await self.db.execute(query)
            if result.first() is not None:
                logger.bind(entity=self.entity_name, field=rule.name).warning(
                    f"Duplicate {self.entity_name}.{rule.name} {value!r}"
                )
                raise UniquenessViolation(rule.name, value, entity=self.entity_name)

    async def _check_changes(self, entity: Base, exclude_id: Optional[Any] = None) -> None:
        """
        Validate pending changes on a persistent ``entity``.

        A rejected change is discarded by reloading the entity, so the
        session holds nothing dirty for the next commit.
        """
        try:
            self._validate(entity)
            await self._check_unique(entity, exclude_id=exclude_id)
        except ConstraintViolation:
            await self.db.refresh(entity)
            raise

    async def _commit(self) -> None:
        """Commit, translating integrity errors into violation kinds."""
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            violation = translate_integrity_error(e, entity=self.entity_name)
            logger.bind(entity=self.entity_name).warning(f"Integrity error on {self.entity_name}: {violation.detail}")
            raise violation from e
