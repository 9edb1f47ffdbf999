"""Workspace-scoped access to languages, keys and translations.

Reads raise :class:`PersistenceError` on failure. Single-row writes commit
on their own and roll back on failure so one bad row never poisons the
session for the rows after it. Upserts are one ``INSERT .. ON CONFLICT``
statement on the table's unique key, so a concurrent writer of the same
row is overwritten rather than reported as a conflict.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from lingohub_api.errors import PersistenceError
from lingohub_models import I18nKey, I18nLanguage, I18nTranslation, TranslationStatus

logger = logging.getLogger(__name__)


class I18nStore:
    def __init__(self, session: Session) -> None:
        self.session = session

    # --- reads ---

    def list_languages(self, workspace_id: UUID) -> List[I18nLanguage]:
        try:
            return list(
                self.session.exec(
                    select(I18nLanguage)
                    .where(I18nLanguage.workspace_id == workspace_id)
                    .order_by(I18nLanguage.code)
                ).all()
            )
        except SQLAlchemyError as exc:
            logger.exception("Error fetching languages", extra={"workspace_id": str(workspace_id)})
            raise PersistenceError("Error fetching languages") from exc

    def find_language(self, workspace_id: UUID, code: str) -> Optional[I18nLanguage]:
        try:
            return self.session.exec(
                select(I18nLanguage).where(
                    I18nLanguage.workspace_id == workspace_id,
                    I18nLanguage.code == code,
                )
            ).first()
        except SQLAlchemyError as exc:
            logger.exception("Error fetching language", extra={"workspace_id": str(workspace_id), "code": code})
            raise PersistenceError("Error fetching language") from exc

    def list_keys(self, workspace_id: UUID, keys: Optional[Sequence[str]] = None) -> List[I18nKey]:
        stmt = select(I18nKey).where(I18nKey.workspace_id == workspace_id)
        if keys is not None:
            stmt = stmt.where(I18nKey.key.in_(list(keys)))
        try:
            return list(self.session.exec(stmt.order_by(I18nKey.module, I18nKey.key)).all())
        except SQLAlchemyError as exc:
            logger.exception("Error fetching keys", extra={"workspace_id": str(workspace_id)})
            raise PersistenceError("Error fetching keys") from exc

    def list_translations(
        self,
        workspace_id: UUID,
        key_ids: Optional[Iterable[int]] = None,
        language_id: Optional[int] = None,
    ) -> List[I18nTranslation]:
        stmt = select(I18nTranslation).where(I18nTranslation.workspace_id == workspace_id)
        if key_ids is not None:
            ids = list(key_ids)
            if not ids:
                return []
            stmt = stmt.where(I18nTranslation.key_id.in_(ids))
        if language_id is not None:
            stmt = stmt.where(I18nTranslation.language_id == language_id)
        try:
            return list(self.session.exec(stmt).all())
        except SQLAlchemyError as exc:
            logger.exception("Error fetching translations", extra={"workspace_id": str(workspace_id)})
            raise PersistenceError("Error fetching translations") from exc

    # --- writes ---

    def create_language(self, workspace_id: UUID, code: str, name: str, is_rtl: bool) -> I18nLanguage:
        language = I18nLanguage(workspace_id=workspace_id, code=code, name=name, is_rtl=is_rtl)
        try:
            self.session.add(language)
            self.session.commit()
            self.session.refresh(language)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Error creating language", extra={"workspace_id": str(workspace_id), "code": code})
            raise PersistenceError(f"Failed to create language: {code}") from exc
        logger.info("Language created", extra={"workspace_id": str(workspace_id), "code": code, "language_id": language.id})
        return language

    def insert_keys(self, workspace_id: UUID, rows: Sequence[Mapping[str, Any]]) -> Dict[str, int]:
        """Insert all rows in one transaction and return ``{key: id}``."""
        if not rows:
            return {}
        created = [I18nKey(workspace_id=workspace_id, **row) for row in rows]
        try:
            self.session.add_all(created)
            self.session.flush()
            ids = {k.key: k.id for k in created}
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Error creating keys", extra={"workspace_id": str(workspace_id), "count": len(rows)})
            raise PersistenceError("Failed to create keys") from exc
        return ids

    def update_key(self, workspace_id: UUID, key_id: int, values: Mapping[str, Any]) -> None:
        try:
            key = self.session.exec(
                select(I18nKey).where(I18nKey.workspace_id == workspace_id, I18nKey.id == key_id)
            ).first()
            if key is None:
                raise PersistenceError(f"Key {key_id} not found")
            for attr, value in values.items():
                setattr(key, attr, value)
            self.session.add(key)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError(f"Failed to update key {key_id}: {exc.__class__.__name__}") from exc

    def _insert(self, table):
        if self.session.get_bind().dialect.name == "sqlite":
            return sqlite_insert(table)
        return pg_insert(table)

    def upsert_translation(self, workspace_id: UUID, key_id: int, language_id: int, value: str) -> None:
        """Write one value on the (key_id, language_id) conflict key as a draft."""
        table = I18nTranslation.__table__
        stmt = self._insert(table).values(
            workspace_id=workspace_id,
            key_id=key_id,
            language_id=language_id,
            value=value,
            status=TranslationStatus.DRAFT.value,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.key_id, table.c.language_id],
            set_={"value": stmt.excluded.value, "status": stmt.excluded.status, "updated_at": func.now()},
        )
        try:
            self.session.exec(stmt)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError(
                f"Failed to upsert translation for key {key_id}: {exc.__class__.__name__}"
            ) from exc

    def upsert_keys(self, workspace_id: UUID, rows: Sequence[Mapping[str, Any]]) -> None:
        """Insert or fully overwrite keys on the (workspace_id, key) conflict key."""
        if not rows:
            return
        table = I18nKey.__table__
        stmt = self._insert(table).values([{"workspace_id": workspace_id, **row} for row in rows])
        overwrite = {name: getattr(stmt.excluded, name) for name in rows[0] if name != "key"}
        overwrite["updated_at"] = func.now()
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.workspace_id, table.c.key],
            set_=overwrite,
        )
        try:
            self.session.exec(stmt)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Error upserting keys", extra={"workspace_id": str(workspace_id), "count": len(rows)})
            raise PersistenceError("Failed to upsert keys") from exc
