"""codectx - codebase context assembly for automated agents."""

__version__ = "0.1.0"
