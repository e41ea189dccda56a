from typing import Callable, Optional

from sqlmodel import Session

from ..services import CustodyService, StateRepository
from .auth import CallerAuth
from .config import Settings, get_settings


def get_custody_service(
    session: Session,
    caller: Optional[str],
    settings: Optional[Settings] = None,
    clock: Optional[Callable[[], int]] = None,
) -> CustodyService:
    settings = settings or get_settings()
    repository = StateRepository(
        session,
        settings.contract_namespace,
        initial_extent=settings.retention_min_extent,
        clock=clock,
    )
    return CustodyService(repository, CallerAuth(caller), settings=settings)
