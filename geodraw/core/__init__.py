"""Core building blocks for geodraw."""

__all__ = [
    "color",
    "config",
    "events",
    "geometry",
    "store",
    "trace",
]
