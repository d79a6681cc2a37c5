"""Reference data: planning framework, canonical orders and glossary."""

from .framework import (
    BRAINSTORM_SECTIONS,
    CATEGORY_ORDER,
    GEO_ORDER,
    KNOWN_GAPS,
    MANIPULATION_RISK,
    category_color,
)
from .glossary import glossary_payload, lookup_term

__all__ = [
    "BRAINSTORM_SECTIONS",
    "CATEGORY_ORDER",
    "GEO_ORDER",
    "KNOWN_GAPS",
    "MANIPULATION_RISK",
    "category_color",
    "glossary_payload",
    "lookup_term",
]
