"""Record store: CRUD over the backing table keyed by CUI."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from contract_tracker.codec.rows import as_text, decode_row, encode_row
from contract_tracker.core.config import StoreConfig
from contract_tracker.core.errors import (
    ContractNotFoundError,
    DuplicateKeyError,
    InvalidRequestError,
    SchemaMismatchError,
)
from contract_tracker.core.headers import IDENTITY_FIELD, label_for, normalize_header
from contract_tracker.core.models import Contract, RawRow
from contract_tracker.store.lock import WriteLock
from contract_tracker.store.tables import Table, TableOpener

logger = logging.getLogger(__name__)


def _as_mapping(data: Mapping[str, Any] | Contract) -> Mapping[str, Any]:
    return data.to_dict() if isinstance(data, Contract) else data


class ContractStore:
    """Locate, insert, update, and delete contracts in a single backing table.

    Writes run under one store-wide ``WriteLock``. Reads take no lock. The
    table is opened through ``opener`` on every call so a missing sheet
    surfaces as ``StoreUnavailableError`` for that request only.
    """

    def __init__(
        self,
        opener: TableOpener,
        config: StoreConfig | None = None,
        lock: WriteLock | None = None,
    ) -> None:
        self._opener = opener
        self.config = config or StoreConfig()
        self.lock = lock or WriteLock(self.config.lock_timeout)

    @property
    def column_map(self) -> Dict[str, str]:
        return self.config.column_map

    def list_all(self) -> List[Contract]:
        """Return every contract in sheet order, header row excluded."""

        values = self._opener().get_all_values()
        if len(values) < 2:
            return []
        headers, *rows = values
        logger.debug("Headers from sheet: %s", headers)
        contracts = [decode_row(row, headers, self.column_map, self.config.day_first) for row in rows]
        logger.info("Read %d contracts", len(contracts))
        return contracts

    def insert(self, data: Mapping[str, Any] | Contract) -> Contract:
        """Append a new row built from ``data`` and return it decoded."""

        data = _as_mapping(data)
        with self.lock.hold():
            table = self._opener()
            headers = table.header_row()
            if self.config.enforce_unique_keys:
                key = data.get(IDENTITY_FIELD)
                if self._locate(table, headers, key) is not None:
                    raise DuplicateKeyError(f"Contract with CUI {as_text(key)} already exists.")
            row = encode_row(data, headers, self.column_map)
            table.append_row(row)
        created = decode_row(row, headers, self.column_map, self.config.day_first)
        logger.info("Created contract %s", created.cui)
        return created

    def locate(self, key: Any) -> Optional[int]:
        """Return the sheet row number of the first row whose CUI matches ``key``."""

        table = self._opener()
        return self._locate(table, table.header_row(), key)

    def update(self, data: Mapping[str, Any] | Contract) -> Contract:
        """Overwrite the row matching ``data['cui']`` and return it decoded."""

        data = _as_mapping(data)
        key = data.get(IDENTITY_FIELD)
        with self.lock.hold():
            table = self._opener()
            headers = table.header_row()
            row_number = self._locate(table, headers, key)
            if row_number is None:
                raise ContractNotFoundError(as_text(key))
            row = encode_row(data, headers, self.column_map)
            table.update_row(row_number, row)
        updated = decode_row(row, headers, self.column_map, self.config.day_first)
        logger.info("Updated contract %s at row %d", updated.cui, row_number)
        return updated

    def remove(self, key: Any) -> Dict[str, Any]:
        """Delete the row matching ``key``; later rows shift up."""

        if not as_text(key):
            raise InvalidRequestError("CUI (id) is missing in the delete payload.")
        with self.lock.hold():
            table = self._opener()
            row_number = self._locate(table, table.header_row(), key)
            if row_number is None:
                raise ContractNotFoundError(
                    as_text(key), f"Contract with CUI {as_text(key)} not found for deletion."
                )
            table.delete_row(row_number)
        logger.info("Deleted contract %s from row %d", as_text(key), row_number)
        return {"success": True, "id": key}

    def _identity_column(self, headers: RawRow) -> int:
        label = label_for(IDENTITY_FIELD, self.column_map)
        if label is not None:
            target = normalize_header(label)
            for index, header in enumerate(headers):
                if normalize_header(header) == target:
                    return index
        raise SchemaMismatchError(f'Could not find CUI column header "{label}" in the sheet.')

    def _locate(self, table: Table, headers: RawRow, key: Any) -> Optional[int]:
        column = self._identity_column(headers)
        wanted = as_text(key)
        if not wanted:
            return None
        cells = table.column_values(column + 1)[1:]
        for offset, cell in enumerate(cells):
            if as_text(cell) == wanted:
                return offset + 2
        return None
