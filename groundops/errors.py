"""Domain error hierarchy shared by services and controllers."""

from __future__ import annotations

from typing import Any


class GroundOpsError(Exception):
    """Base class for errors raised by the ground-operations core."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict[str, Any]:
        return {"message": self.message}


class InvalidParameters(GroundOpsError):
    """Malformed or out-of-range input to the estimator or simulator."""

    status_code = 400

    def __init__(self, field: str, message: str | None = None) -> None:
        super().__init__(message or f"Invalid value for '{field}'")
        self.field = field

    def to_payload(self) -> dict[str, Any]:
        return {"message": self.message, "field": self.field}


class NotFound(GroundOpsError):
    """Referenced flight or gate does not exist."""

    status_code = 404

    def __init__(self, entity: str, identifier: Any) -> None:
        super().__init__(f"{entity} {identifier} not found")
        self.entity = entity
        self.identifier = identifier


class ConflictState(GroundOpsError):
    """Operation is incompatible with the current gate/flight state."""

    status_code = 409


class InternalComputationError(GroundOpsError):
    """Arithmetic produced a non-finite result."""

    status_code = 500

    def to_payload(self) -> dict[str, Any]:
        return {"message": "Internal computation error"}


__all__ = [
    "GroundOpsError",
    "InvalidParameters",
    "NotFound",
    "ConflictState",
    "InternalComputationError",
]
