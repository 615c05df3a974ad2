"""Form-level checks run before a contract is submitted to the API."""
import logging
import re
from typing import Any, Dict, Mapping
from urllib.parse import urlparse

from contract_tracker.core.models import ContractType


logger = logging.getLogger(__name__)

LINK_FIELDS = ("contract_link", "valuation_documents_link", "guarantees_link")

_DOMAIN_PATTERN = re.compile(r"^[A-Za-z0-9-]+(\.[A-Za-z0-9-]+)*(:\d+)?$")


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def _number(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def is_valid_url(raw: str) -> bool:
    """Accept empty values and URL-like strings with or without a scheme."""

    candidate = raw.strip()
    if not candidate:
        return True
    if not re.match(r"^https?://", candidate, re.IGNORECASE):
        candidate = f"https://{candidate}"
    parsed = urlparse(candidate)
    return bool(parsed.netloc) and bool(_DOMAIN_PATTERN.match(parsed.netloc))


def validate_contract(data: Mapping[str, Any]) -> Dict[str, str]:
    """Return a mapping of field name to message for every problem found."""

    errors: Dict[str, str] = {}

    required_text = {
        "cui": "CUI is required.",
        "package_name": "Package name is required.",
        "contractor": "Contractor is required.",
        "educational_institution": "Educational institution is required.",
    }
    for field_name, message in required_text.items():
        if not _text(data.get(field_name)):
            errors[field_name] = message

    contract_type = _text(data.get("contract_type"))
    if not contract_type:
        errors["contract_type"] = "Contract type is required."
    elif contract_type not in {member.value for member in ContractType}:
        errors["contract_type"] = f"Unknown contract type {contract_type}."

    for field_name in ("original_amount", "current_amount"):
        amount = _number(data.get(field_name))
        if amount is None or amount < 0:
            errors[field_name] = "Amount must be a non-negative number."

    progress = _number(data.get("progress"))
    if progress is None or progress < 0 or progress > 100:
        errors["progress"] = "Progress must be between 0 and 100."

    start_date = _text(data.get("start_date"))
    end_date = _text(data.get("end_date"))
    if not start_date:
        errors["start_date"] = "Start date is required."
    if not end_date:
        errors["end_date"] = "End date is required."
    elif start_date and end_date < start_date:
        # ISO dates compare correctly as text.
        errors["end_date"] = "End date cannot be earlier than the start date."

    for field_name in LINK_FIELDS:
        link = _text(data.get(field_name))
        if link and not is_valid_url(link):
            errors[field_name] = "Enter a valid URL."

    if errors:
        logger.debug("Contract form has %d issue(s): %s", len(errors), sorted(errors))
    return errors
