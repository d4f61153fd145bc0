"""Game registry contract and the in-memory implementation."""

from .registry import GameRegistry, InMemoryGameRegistry, GameInfo, PropertyRange

__all__ = [
    "GameRegistry",
    "InMemoryGameRegistry",
    "GameInfo",
    "PropertyRange",
]
