"""Core engine package for Landlord."""

__all__ = [
    "cards",
    "deck",
    "player",
    "table",
    "categories",
    "selection",
    "auction",
    "trick",
    "state",
    "scoring",
    "game",
    "events",
    "rules_schema",
    "service",
    "logging_utils",
]
