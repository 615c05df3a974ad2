"""HTTP client for the contracts API."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping, Optional

import requests

from contract_tracker.core.config import api_base_url
from contract_tracker.core.errors import RemoteError, TransportError
from contract_tracker.core.models import DERIVED_FIELDS, Contract

logger = logging.getLogger(__name__)


class ContractService:
    """Thin wrapper around the read and write endpoints.

    No timeouts or retries are applied: every call runs to completion or
    fails, and repeating it is left to the caller.
    """

    def __init__(self, base_url: str | None = None, session: Optional[requests.Session] = None) -> None:
        self.base_url = (base_url or api_base_url()).rstrip("/")
        self.session = session or requests.Session()

    def get_contracts(self) -> List[Contract]:
        data = self._handle(self._send("GET"))
        return [Contract.from_dict(item) for item in data.get("contracts") or []]

    def create_contract(self, draft: Mapping[str, Any]) -> Contract:
        payload = {key: value for key, value in draft.items() if key not in ("id", "status")}
        return Contract.from_dict(self._post("CREATE", payload))

    def update_contract(self, contract: Contract | Mapping[str, Any]) -> Contract:
        payload = contract.to_dict() if isinstance(contract, Contract) else dict(contract)
        return Contract.from_dict(self._post("UPDATE", payload))

    def delete_contract(self, key: str) -> Dict[str, Any]:
        return self._post("DELETE", {"id": key})

    def _post(self, action: str, payload: Mapping[str, Any]) -> Dict[str, Any]:
        body = json.dumps({"action": action, "payload": dict(payload)}, default=str)
        # text/plain keeps browsers and script hosts from issuing a CORS preflight.
        response = self._send(
            "POST",
            data=body.encode("utf-8"),
            headers={"Content-Type": "text/plain;charset=utf-8"},
        )
        return self._handle(response)

    def _send(self, method: str, **kwargs: Any) -> requests.Response:
        try:
            return self.session.request(method, f"{self.base_url}/", allow_redirects=True, **kwargs)
        except requests.RequestException as exc:
            logger.error("%s %s failed: %s", method, self.base_url, exc)
            raise TransportError(f"Network error: {exc}") from exc

    @staticmethod
    def _handle(response: requests.Response) -> Dict[str, Any]:
        if not response.ok:
            try:
                message = response.json().get("error")
            except (ValueError, AttributeError):
                message = None
            raise RemoteError(
                message or f"Error {response.status_code}: {response.reason}",
                status_code=response.status_code,
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise TransportError("Response was not valid JSON.") from exc
        if not isinstance(data, dict):
            raise TransportError("Unexpected response shape from the contracts API.")
        return data


def draft_from_contract(contract: Contract) -> Dict[str, Any]:
    """Strip derived fields so a contract can be submitted as a new draft."""

    return {key: value for key, value in contract.to_dict().items() if key not in DERIVED_FIELDS}
