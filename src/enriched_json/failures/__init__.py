from .builder import build_details, enrich_failure, extract_value
from .extras import ExtrasRegistry, allow_listed_attributes
from .models import DetailsPayload, EnrichedFailure

__all__ = [
    "DetailsPayload",
    "EnrichedFailure",
    "ExtrasRegistry",
    "allow_listed_attributes",
    "build_details",
    "enrich_failure",
    "extract_value",
]
