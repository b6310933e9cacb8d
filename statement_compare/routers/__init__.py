# statement_compare/routers/__init__.py

from statement_compare.routers import health
from statement_compare.routers import sessions
from statement_compare.routers import clean
from statement_compare.routers import reconcile

__all__ = ["health", "sessions", "clean", "reconcile"]
