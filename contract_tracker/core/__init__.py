"""Core building blocks for the contract_tracker package."""
from contract_tracker.core.config import StoreConfig, load_store_config
from contract_tracker.core.headers import COLUMN_MAP, build_header_map, normalize_header
from contract_tracker.core.logging import configure_logging
from contract_tracker.core.models import Contract, ContractStatus, ContractType, RawRow
from contract_tracker.core.validation import validate_contract

__all__ = [
    "COLUMN_MAP",
    "Contract",
    "ContractStatus",
    "ContractType",
    "RawRow",
    "StoreConfig",
    "build_header_map",
    "configure_logging",
    "load_store_config",
    "normalize_header",
    "validate_contract",
]
