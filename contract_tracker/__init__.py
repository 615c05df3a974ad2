"""Spreadsheet-backed contract tracking: row codec, record store, API, and client cache."""
from contract_tracker.codec import decode_row, encode_row
from contract_tracker.core import (
    COLUMN_MAP,
    Contract,
    ContractStatus,
    ContractType,
    StoreConfig,
    configure_logging,
    load_store_config,
    validate_contract,
)
from contract_tracker.client import ContractCache, ContractFilter, ContractService, filter_contracts
from contract_tracker.store import ContractStore, MemoryTable, WriteLock, sheets_opener

__version__ = "0.1.0"

__all__ = [
    "COLUMN_MAP",
    "Contract",
    "ContractCache",
    "ContractFilter",
    "ContractService",
    "ContractStatus",
    "ContractStore",
    "ContractType",
    "MemoryTable",
    "StoreConfig",
    "WriteLock",
    "configure_logging",
    "decode_row",
    "encode_row",
    "filter_contracts",
    "load_store_config",
    "sheets_opener",
    "validate_contract",
]
