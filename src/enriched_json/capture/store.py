from __future__ import annotations

from .models import CapturedSnapshot


class CaptureStore:
    """Snapshots keyed by test identity for the lifetime of one run.

    One writer (the active test's assertion hook) and one reader (the output
    correlator). Recording overwrites, so the last assertion of a test wins.
    The store only shrinks when ``clear_all`` is called at emission time.
    """

    def __init__(self) -> None:
        self._snapshots: dict[str, CapturedSnapshot] = {}

    def record(self, test_id: str, snapshot: CapturedSnapshot) -> None:
        self._snapshots[test_id] = snapshot

    def get(self, test_id: str) -> CapturedSnapshot | None:
        return self._snapshots.get(test_id)

    def clear_all(self) -> None:
        self._snapshots = {}

    def __len__(self) -> int:
        return len(self._snapshots)

    def __contains__(self, test_id: object) -> bool:
        return test_id in self._snapshots
