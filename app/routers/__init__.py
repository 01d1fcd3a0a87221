from . import health, predictions

__all__ = [
    "health",
    "predictions",
]
