"""
Registry Service - CRUD and reorder over the record store.

All input validation happens here, before the store is touched.
"""

from __future__ import annotations

import logging
from typing import Any

from launchpad.core.exceptions import NotFoundError, ValidationError
from launchpad.core.models import AppRecord, validate_record
from launchpad.registry.storage import AppStore

logger = logging.getLogger(__name__)

MAX_SETTING_KEY_LENGTH = 128


class RegistryService:
    """
    Ordered application registry.

    Wraps an AppStore and enforces the record invariants:
    unique ids, non-empty names, sort_order untouched by edits,
    and exact-id-set reorders.
    """

    def __init__(self, store: AppStore):
        self._store = store

    @property
    def store(self) -> AppStore:
        """Underlying record store."""
        return self._store

    def list(self) -> list[AppRecord]:
        """All records in display order."""
        return [AppRecord.from_row(row) for row in self._store.list_rows()]

    def get(self, app_id: str) -> AppRecord:
        """
        Load one record.

        Raises:
            NotFoundError: If no record has this id
        """
        row = self._store.get_row(app_id)
        if row is None:
            raise NotFoundError(f"Application '{app_id}' not found", app_id=app_id, operation="read")
        return AppRecord.from_row(row)

    def create(self, data: dict[str, Any] | AppRecord) -> AppRecord:
        """
        Add a record.

        ``sort_order`` absent or None appends the record to the end.

        Raises:
            ValidationError: If id or name is empty, or a field is invalid
            ConflictError: If the id already exists
        """
        fields = data.to_row() if isinstance(data, AppRecord) else dict(data)
        explicit_order = fields.get("sort_order")
        fields["sort_order"] = explicit_order if explicit_order is not None else 0

        record = validate_record(fields)
        row = record.to_row()
        if explicit_order is None:
            row["sort_order"] = None

        stored = self._store.insert_row(row)
        logger.info(f"Created application '{record.id}' at position {stored['sort_order']}")
        return AppRecord.from_row(stored)

    def update(self, app_id: str, fields: dict[str, Any]) -> AppRecord:
        """
        Partially update a record; sort_order is never changed here.

        Raises:
            ValidationError: If fields change the id or hold invalid values
            NotFoundError: If no record has this id
        """
        changes = dict(fields)
        body_id = changes.pop("id", None)
        if body_id is not None and body_id != app_id:
            raise ValidationError(
                "Record id cannot be changed",
                field="id",
                details={"path_id": app_id, "body_id": body_id},
            )
        if "sort_order" in changes:
            changes.pop("sort_order")
            logger.debug(f"Ignoring sort_order in update of '{app_id}'; use reorder")

        existing = self._store.get_row(app_id)
        if existing is None:
            raise NotFoundError(f"Application '{app_id}' not found", app_id=app_id, operation="update")

        merged = validate_record({**existing, **changes})
        row = merged.to_row()
        if not self._store.update_row(app_id, {col: row[col] for col in changes}):
            # Deleted between the read and the write
            raise NotFoundError(f"Application '{app_id}' not found", app_id=app_id, operation="update")

        logger.info(f"Updated application '{app_id}' ({', '.join(sorted(changes)) or 'no fields'})")
        return self.get(app_id)

    def delete(self, app_id: str) -> None:
        """
        Remove a record. Remaining sort_order values are not renumbered.

        Raises:
            NotFoundError: If no record has this id
        """
        if not self._store.delete_row(app_id):
            raise NotFoundError(f"Application '{app_id}' not found", app_id=app_id, operation="delete")
        logger.info(f"Deleted application '{app_id}'")

    def reorder(self, ordered_ids: list[str]) -> None:
        """
        Set the display order to ``ordered_ids`` atomically.

        Raises:
            ValidationError: If ordered_ids is not exactly the current id set
        """
        if not isinstance(ordered_ids, list) or not all(isinstance(i, str) for i in ordered_ids):
            raise ValidationError("Order must be a list of application ids", field="order")

        try:
            self._store.reorder(ordered_ids)
        except ValidationError as e:
            logger.warning(f"Rejected reorder: {e}")
            raise
        logger.info(f"Reordered {len(ordered_ids)} applications")

    def get_settings(self) -> dict[str, str]:
        """All global settings."""
        return self._store.get_settings()

    def update_settings(self, values: dict[str, Any]) -> dict[str, str]:
        """
        Upsert settings; None deletes a key.

        Raises:
            ValidationError: If a key is empty or too long, or a value is not scalar
        """
        errors: list[str] = []
        normalized: dict[str, str | None] = {}
        for key, value in values.items():
            if not isinstance(key, str) or not key.strip():
                errors.append("keys must be non-empty strings")
                continue
            if len(key) > MAX_SETTING_KEY_LENGTH:
                errors.append(f"{key[:20]}...: key longer than {MAX_SETTING_KEY_LENGTH}")
                continue
            if value is None:
                normalized[key] = None
            elif isinstance(value, bool):
                normalized[key] = "true" if value else "false"
            elif isinstance(value, (str, int, float)):
                normalized[key] = str(value)
            else:
                errors.append(f"{key}: value must be a string, number, boolean or null")

        if errors:
            raise ValidationError("Invalid settings", field="settings", validation_errors=errors)

        result = self._store.put_settings(normalized)
        logger.info(f"Updated {len(normalized)} setting(s)")
        return result
