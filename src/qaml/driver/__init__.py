"""Re-exports the UI driver contract."""
from .base import UIDriver
from .types import UINode

__all__ = ["UIDriver", "UINode"]
