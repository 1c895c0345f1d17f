from .hook import AssertionObserver, CurrentTest

__all__ = ["AssertionObserver", "CurrentTest"]
