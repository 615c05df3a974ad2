"""HTTP API exposing the contract store."""
from contract_tracker.api.app import create_app

__all__ = ["create_app"]
