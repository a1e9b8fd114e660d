from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Iterable, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from groundops.application.interfaces import GroundOpsRegistry
from groundops.errors import NotFound
from groundops.models import CrisisState, Flight, FlightStatus, Gate, GateStatus

logger = logging.getLogger(__name__)


class SQLAlchemyRegistry(GroundOpsRegistry):
    """SQLAlchemy implementation of the ground-operations registry"""

    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        try:
            yield
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            logger.warning("Registry transaction rolled back", exc_info=True)
            raise

    async def get_flight(self, flight_id: int) -> Optional[Flight]:
        result = await self.session.execute(select(Flight).where(Flight.id == flight_id))
        return result.scalar_one_or_none()

    async def list_flights(
        self, statuses: Optional[Iterable[FlightStatus]] = None
    ) -> List[Flight]:
        query = select(Flight).order_by(Flight.id)
        if statuses is not None:
            query = query.where(Flight.status.in_(list(statuses)))
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def create_flight(self, **fields: Any) -> Flight:
        flight = Flight(**fields)
        self.session.add(flight)
        await self.session.flush()
        await self.session.refresh(flight)
        return flight

    async def update_flight(self, flight_id: int, **fields: Any) -> Flight:
        flight = await self.get_flight(flight_id)
        if flight is None:
            raise NotFound("Flight", flight_id)
        for name, value in fields.items():
            setattr(flight, name, value)
        await self.session.flush()
        return flight

    async def delete_flights(self, flight_ids: Iterable[int]) -> int:
        ids = list(flight_ids)
        if not ids:
            return 0
        await self.session.flush()
        result = await self.session.execute(
            delete(Flight)
            .where(Flight.id.in_(ids))
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0

    async def list_gates(self) -> List[Gate]:
        result = await self.session.execute(select(Gate).order_by(Gate.id))
        return list(result.scalars().all())

    async def get_gate(self, gate_id: int) -> Optional[Gate]:
        result = await self.session.execute(select(Gate).where(Gate.id == gate_id))
        return result.scalar_one_or_none()

    async def create_gate(self, gate_number: str) -> Gate:
        gate = Gate(gate_number=gate_number, status=GateStatus.FREE)
        self.session.add(gate)
        await self.session.flush()
        await self.session.refresh(gate)
        return gate

    async def update_gate(self, gate_id: int, **fields: Any) -> Gate:
        gate = await self.get_gate(gate_id)
        if gate is None:
            raise NotFound("Gate", gate_id)
        for name, value in fields.items():
            setattr(gate, name, value)
        await self.session.flush()
        return gate

    async def get_crisis_state(self) -> Optional[CrisisState]:
        result = await self.session.execute(
            select(CrisisState).order_by(CrisisState.id).limit(1)
        )
        return result.scalar_one_or_none()

    async def upsert_crisis_state(self, **fields: Any) -> CrisisState:
        state = await self.get_crisis_state()
        if state is None:
            state = CrisisState(**fields)
            self.session.add(state)
            await self.session.flush()
            await self.session.refresh(state)
            return state
        for name, value in fields.items():
            setattr(state, name, value)
        await self.session.flush()
        return state


__all__ = ["SQLAlchemyRegistry"]
