from .engine import attachable_diff, generate_diff, matcher_diffability, values_diffable

__all__ = ["attachable_diff", "generate_diff", "matcher_diffability", "values_diffable"]
