"""HTTP surface for the contract store: one read endpoint and one write endpoint."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from contract_tracker.core.config import load_store_config
from contract_tracker.core.errors import ContractTrackerError, InvalidRequestError
from contract_tracker.store.records import ContractStore
from contract_tracker.store.tables import sheets_opener

logger = logging.getLogger(__name__)


class WriteRequest(BaseModel):
    """Body of a write call: ``{"action": ..., "payload": {...}}``."""

    action: str
    payload: Dict[str, Any]


def parse_write_request(body: bytes) -> WriteRequest:
    """Decode and validate a raw request body before the store is touched."""

    try:
        data = json.loads(body or b"null")
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise InvalidRequestError("Request body is not valid JSON.") from exc
    if not isinstance(data, dict):
        raise InvalidRequestError("Action or payload missing.")
    try:
        request = WriteRequest.model_validate(data)
    except ValidationError as exc:
        raise InvalidRequestError("Action or payload missing.") from exc
    if not request.action.strip():
        raise InvalidRequestError("Action or payload missing.")
    return request


def dispatch(store: ContractStore, request: WriteRequest) -> Dict[str, Any]:
    """Route a validated write request to the matching store operation."""

    action = request.action.strip().upper()
    if action == "CREATE":
        return store.insert(request.payload).to_dict()
    if action == "UPDATE":
        return store.update(request.payload).to_dict()
    if action == "DELETE":
        return store.remove(request.payload.get("id"))
    raise InvalidRequestError(f"Unrecognized action: {request.action}")


def create_app(store: ContractStore | None = None) -> FastAPI:
    """Build the API; without a store, one is opened from the environment config."""

    if store is None:
        config = load_store_config()
        store = ContractStore(sheets_opener(config), config)

    app = FastAPI(title="Contract Tracker API", version="0.1.0")
    app.state.store = store
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/")
    def read_contracts() -> Any:
        try:
            contracts = store.list_all()
        except ContractTrackerError as exc:
            logger.error("Error reading contracts: %s", exc)
            return JSONResponse(status_code=500, content={"error": f"Server error: {exc}"})
        return {"contracts": [contract.to_dict() for contract in contracts]}

    @app.post("/")
    async def write_contract(request: Request) -> Any:
        # Read the raw body so text/plain clients (no CORS preflight) work too.
        body = await request.body()
        try:
            write_request = parse_write_request(body)
            result = await run_in_threadpool(dispatch, store, write_request)
        except ContractTrackerError as exc:
            logger.error("Error writing contract: %s | Payload: %s", exc, body[:500])
            return JSONResponse(status_code=400, content={"error": f"Request error: {exc}"})
        return result

    return app
