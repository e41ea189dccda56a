import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Optional

from .core.config import get_settings
from .core.db import get_session, init_db
from .core.dependencies import get_custody_service
from .services import CustodyService

settings = get_settings()
logging.basicConfig(level=settings.log_level)


def init_app() -> None:
    init_db()


@contextmanager
def open_custody(caller: Optional[str] = None) -> Iterator[CustodyService]:
    """Yield a service bound to a fresh session, acting as ``caller``."""
    with get_session() as session:
        yield get_custody_service(session, caller, settings=settings)
