from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

MAX_DEPTH = 5
MAX_SEQUENCE_SIZE = 100
MAX_MAPPING_SIZE = 100
MAX_STRING_LENGTH = 1000
MAX_FIELDS = 10


class SerializationLimits(BaseModel):
    max_depth: int = Field(default=MAX_DEPTH, ge=0)
    max_sequence_size: int = Field(default=MAX_SEQUENCE_SIZE, gt=0)
    max_mapping_size: int = Field(default=MAX_MAPPING_SIZE, gt=0)
    max_string_length: int = Field(default=MAX_STRING_LENGTH, gt=0)
    max_fields: int = Field(default=MAX_FIELDS, ge=0)

    model_config = ConfigDict(extra="forbid", frozen=True)


class ReportConfig(BaseModel):
    output_path: str | None = None
    html_path: str | None = None
    limits: SerializationLimits = Field(default_factory=SerializationLimits)
    capture_passing: bool = True
    debug: bool = False

    model_config = ConfigDict(extra="forbid")
