"""Facet filters and free-text search over the cached contracts."""
from dataclasses import asdict, dataclass
from typing import Any, Iterable, List, Optional

from contract_tracker.core.models import Contract

SEARCH_FIELDS = ("educational_institution", "cui", "contractor")


@dataclass(frozen=True)
class ContractFilter:
    """Selected value per facet; ``None`` or ``''`` means no constraint."""

    contract_type: Optional[str] = None
    package_name: Optional[str] = None
    contractor: Optional[str] = None
    educational_institution: Optional[str] = None

    def active(self) -> dict:
        return {key: value for key, value in asdict(self).items() if value}


def _fold(value: Any) -> str:
    return str(value or "").casefold()


def is_visible(record: Contract, filters: ContractFilter, search_term: str = "") -> bool:
    """True when ``record`` matches every active facet and the search term."""

    for field_name, wanted in filters.active().items():
        if _fold(getattr(record, field_name)) != _fold(wanted):
            return False

    if not search_term:
        return True
    needle = _fold(search_term)
    return any(needle in _fold(getattr(record, field_name)) for field_name in SEARCH_FIELDS)


def filter_contracts(
    records: Iterable[Contract], filters: ContractFilter, search_term: str = ""
) -> List[Contract]:
    """Return the visible subset of ``records`` in their original order."""

    return [record for record in records if is_visible(record, filters, search_term)]
