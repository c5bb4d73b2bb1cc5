"""FastAPI routers acting as controllers in the MVC architecture."""

from . import catalog, sessions

__all__ = ["catalog", "sessions"]
