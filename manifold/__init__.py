"""
Manifold - Essence Manifestation Engine

A deterministic, rules-driven engine that turns a game-agnostic asset
essence into game-specific variants. The engine provides:
- Essence scoring and compatibility factors
- Per-game interpretation rules with a sandboxed formula evaluator
- Template-driven variant generation
- Cross-game variant conversion with fidelity scoring
- Multi-layer consistency validation
"""

__version__ = "0.1.0"
