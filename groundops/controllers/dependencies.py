"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from groundops.application.interfaces import GroundOpsRegistry
from groundops.database import get_session
from groundops.infrastructure.persistence import SQLAlchemyRegistry
from groundops.services.crisis import CrisisEngine

SessionDep = Annotated[AsyncSession, Depends(get_session)]


async def get_registry(session: SessionDep) -> GroundOpsRegistry:
    """Wrap the request-scoped session in the registry abstraction."""

    return SQLAlchemyRegistry(session)


def get_crisis_engine(request: Request) -> CrisisEngine:
    """Return the process-wide crisis engine created at startup."""

    return request.app.state.crisis_engine


RegistryDep = Annotated[GroundOpsRegistry, Depends(get_registry)]
CrisisEngineDep = Annotated[CrisisEngine, Depends(get_crisis_engine)]


__all__ = [
    "get_registry",
    "get_crisis_engine",
    "SessionDep",
    "RegistryDep",
    "CrisisEngineDep",
]
