from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Any, Iterable, List, Optional

from groundops.models import CrisisState, Flight, FlightStatus, Gate


class GroundOpsRegistry(ABC):
    """Persistence contract for flights, gates and the crisis singleton.

    Write methods stage changes; ``transaction()`` makes a group of writes
    durable together or not at all.
    """

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[None]:
        ...

    # Flights

    @abstractmethod
    async def get_flight(self, flight_id: int) -> Optional[Flight]:
        ...

    @abstractmethod
    async def list_flights(
        self, statuses: Optional[Iterable[FlightStatus]] = None
    ) -> List[Flight]:
        ...

    @abstractmethod
    async def create_flight(self, **fields: Any) -> Flight:
        ...

    @abstractmethod
    async def update_flight(self, flight_id: int, **fields: Any) -> Flight:
        ...

    @abstractmethod
    async def delete_flights(self, flight_ids: Iterable[int]) -> int:
        ...

    # Gates

    @abstractmethod
    async def list_gates(self) -> List[Gate]:
        ...

    @abstractmethod
    async def get_gate(self, gate_id: int) -> Optional[Gate]:
        ...

    @abstractmethod
    async def create_gate(self, gate_number: str) -> Gate:
        ...

    @abstractmethod
    async def update_gate(self, gate_id: int, **fields: Any) -> Gate:
        ...

    # Crisis state

    @abstractmethod
    async def get_crisis_state(self) -> Optional[CrisisState]:
        ...

    @abstractmethod
    async def upsert_crisis_state(self, **fields: Any) -> CrisisState:
        ...
