"""Backing tables and the locked record store."""
from contract_tracker.store.lock import WriteLock
from contract_tracker.store.records import ContractStore
from contract_tracker.store.tables import MemoryTable, SheetsTable, sheets_opener

__all__ = ["ContractStore", "MemoryTable", "SheetsTable", "WriteLock", "sheets_opener"]
