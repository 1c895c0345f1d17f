from .models import CapturedSnapshot
from .store import CaptureStore

__all__ = ["CaptureStore", "CapturedSnapshot"]
