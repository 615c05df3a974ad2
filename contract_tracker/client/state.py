"""Pure state transitions for the client-side contract cache.

The cache only changes after the API has confirmed an operation; each
confirmation is an event and ``reduce`` folds it into a new ``CacheState``.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Tuple, Union

from contract_tracker.core.models import FACET_FIELDS, Contract


@dataclass(frozen=True)
class CacheState:
    records: Tuple[Contract, ...] = ()
    loading: bool = False
    error: str | None = None


@dataclass(frozen=True)
class FetchStarted:
    pass


@dataclass(frozen=True)
class FetchSucceeded:
    records: Tuple[Contract, ...]


@dataclass(frozen=True)
class FetchFailed:
    message: str


@dataclass(frozen=True)
class CreateSucceeded:
    record: Contract


@dataclass(frozen=True)
class UpdateSucceeded:
    record: Contract


@dataclass(frozen=True)
class DeleteSucceeded:
    key: str


@dataclass(frozen=True)
class OperationFailed:
    message: str


Event = Union[
    FetchStarted,
    FetchSucceeded,
    FetchFailed,
    CreateSucceeded,
    UpdateSucceeded,
    DeleteSucceeded,
    OperationFailed,
]


def sort_by_key_desc(records: Iterable[Contract]) -> List[Contract]:
    """Sort by identifying key, descending, comparing keys as text.

    ``"9"`` sorts before ``"10"`` here; the order is lexicographic on purpose.
    """

    return sorted(records, key=lambda record: str(record.id), reverse=True)


def reduce(state: CacheState, event: Event) -> CacheState:
    """Return the state that results from applying ``event`` to ``state``."""

    if isinstance(event, FetchStarted):
        return replace(state, loading=True, error=None)
    if isinstance(event, FetchSucceeded):
        return replace(state, records=tuple(sort_by_key_desc(event.records)), loading=False)
    if isinstance(event, FetchFailed):
        return replace(state, loading=False, error=event.message)
    if isinstance(event, CreateSucceeded):
        # New records go first without re-sorting.
        return replace(state, records=(event.record, *state.records))
    if isinstance(event, UpdateSucceeded):
        key = event.record.key
        records = tuple(event.record if record.key == key else record for record in state.records)
        return replace(state, records=records)
    if isinstance(event, DeleteSucceeded):
        records = tuple(record for record in state.records if record.key != str(event.key))
        return replace(state, records=records)
    if isinstance(event, OperationFailed):
        return replace(state, error=event.message)
    raise TypeError(f"Unknown cache event {event!r}")


def unique_values(records: Iterable[Contract]) -> Dict[str, List[str]]:
    """Distinct non-empty trimmed values per facet, in first-seen order."""

    facets: Dict[str, Dict[str, None]] = {name: {} for name in FACET_FIELDS}
    for record in records:
        for name in FACET_FIELDS:
            value = str(getattr(record, name) or "").strip()
            if value:
                facets[name].setdefault(value, None)
    return {name: list(values) for name, values in facets.items()}
