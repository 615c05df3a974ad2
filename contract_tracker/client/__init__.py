"""Client-side service, cache, and filtering for the contracts API."""
from contract_tracker.client.cache import ContractCache
from contract_tracker.client.filters import ContractFilter, filter_contracts, is_visible
from contract_tracker.client.service import ContractService
from contract_tracker.client.summary import ContractSummary, summarize

__all__ = [
    "ContractCache",
    "ContractFilter",
    "ContractService",
    "ContractSummary",
    "filter_contracts",
    "is_visible",
    "summarize",
]
