"""
Request-scoped dependencies for the HTTP API.

Every request gets its own cancellation token, unit of work,
repository and use case instances; nothing is shared between
requests except the storage factories set at startup.
"""
import asyncio
from typing import AsyncContextManager, AsyncGenerator, Awaitable, Callable, Optional

from fastapi import Depends, HTTPException, Request, status

from internal.usecase.ports import ProductRepository, UnitOfWork
from internal.usecase.save_product import SaveProductUseCase
from internal.usecase.update_product import UpdateProductUseCase
from pkg.cancellation import CancellationToken, REASON_CLIENT_DISCONNECTED

DISCONNECT_POLL_INTERVAL = 0.1

UnitOfWorkFactory = Callable[[], AsyncContextManager[UnitOfWork]]
RepositoryFactory = Callable[[UnitOfWork], ProductRepository]
HealthCheck = Callable[[], Awaitable[bool]]


# Dependency injection container (simplified)
class Dependencies:
    """Container for handler dependencies."""

    unit_of_work_factory: Optional[UnitOfWorkFactory] = None
    repository_factory: Optional[RepositoryFactory] = None
    health_check: Optional[HealthCheck] = None
    request_timeout: Optional[float] = None


_deps = Dependencies()


def set_dependencies(
    unit_of_work_factory: UnitOfWorkFactory,
    repository_factory: RepositoryFactory,
    health_check: Optional[HealthCheck] = None,
    request_timeout: Optional[float] = None,
) -> None:
    """
    Set handler dependencies.

    Called during application startup.
    """
    _deps.unit_of_work_factory = unit_of_work_factory
    _deps.repository_factory = repository_factory
    _deps.health_check = health_check
    _deps.request_timeout = request_timeout


def get_health_check() -> Optional[HealthCheck]:
    """Get the storage health probe, if any."""
    return _deps.health_check


async def _watch_disconnect(request: Request, token: CancellationToken) -> None:
    while not token.cancelled:
        if await request.is_disconnected():
            token.cancel(REASON_CLIENT_DISCONNECTED)
            return
        await asyncio.sleep(DISCONNECT_POLL_INTERVAL)


async def get_cancellation_token(
    request: Request,
) -> AsyncGenerator[CancellationToken, None]:
    """
    Create the cancellation token of a request.

    The token fires when the client disconnects or the configured
    request timeout elapses.
    """
    token = CancellationToken(timeout=_deps.request_timeout)
    watcher = asyncio.create_task(_watch_disconnect(request, token))
    try:
        yield token
    finally:
        watcher.cancel()
        await asyncio.gather(watcher, return_exceptions=True)


async def get_unit_of_work() -> AsyncGenerator[UnitOfWork, None]:
    """Open the unit of work of a request; uncommitted work is discarded."""
    if _deps.unit_of_work_factory is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    async with _deps.unit_of_work_factory() as unit_of_work:
        yield unit_of_work


def get_repository(
    unit_of_work: UnitOfWork = Depends(get_unit_of_work),
) -> ProductRepository:
    """Get the product repository bound to the request's unit of work."""
    if _deps.repository_factory is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return _deps.repository_factory(unit_of_work)


def get_save_use_case(
    repository: ProductRepository = Depends(get_repository),
    unit_of_work: UnitOfWork = Depends(get_unit_of_work),
) -> SaveProductUseCase:
    """Get SaveProductUseCase instance."""
    return SaveProductUseCase(repository=repository, unit_of_work=unit_of_work)


def get_update_use_case(
    repository: ProductRepository = Depends(get_repository),
    unit_of_work: UnitOfWork = Depends(get_unit_of_work),
) -> UpdateProductUseCase:
    """Get UpdateProductUseCase instance."""
    return UpdateProductUseCase(repository=repository, unit_of_work=unit_of_work)
