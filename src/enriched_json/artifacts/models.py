from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

ExampleStatus = Literal["passed", "failed", "pending"]


@dataclass(frozen=True)
class ExampleMetadata:
    location: str
    absolute_file_path: str
    rerun_file_path: str
    example_group: str | None = None
    example_group_hierarchy: list[str] = field(default_factory=list)
    described_class: str | None = None
    tags: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "location": self.location,
            "absolute_file_path": self.absolute_file_path,
            "rerun_file_path": self.rerun_file_path,
            "example_group": self.example_group,
            "example_group_hierarchy": list(self.example_group_hierarchy),
            "described_class": self.described_class,
            "tags": dict(self.tags) if self.tags else None,
        }
        return {key: value for key, value in data.items() if value is not None}


@dataclass(frozen=True)
class ExampleResult:
    id: str
    description: str
    full_description: str
    status: ExampleStatus
    file_path: str
    line_number: int | None
    run_time: float
    metadata: ExampleMetadata
    pending_message: str | None = None
    exception: BaseException | None = None
    backtrace: list[str] = field(default_factory=list)
