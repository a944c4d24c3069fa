"""
Parser package for ZText.

Provides the template parser, which turns source text into element chains,
and the property map parser used for command properties.
"""

from .base import ElementParser, parse
from .properties import parse_map

__all__ = ["ElementParser", "parse", "parse_map"]
