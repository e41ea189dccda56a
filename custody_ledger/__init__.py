from .app.core.errors import CustodyAbort
from .app.models import CustodyAccount

__version__ = "0.1.0"

__all__ = ["CustodyAbort", "CustodyAccount"]
