"""FastAPI routers acting as controllers in the MVC architecture."""

from . import analytics, crisis, flights, gates, predictions

__all__ = ["analytics", "crisis", "flights", "gates", "predictions"]
