"""Block layout, ghost-layer exchange and solver base classes for shallow water grids."""

__version__ = "0.1.0"
__all__ = ["types", "solver", "decomposition", "exchange", "offsets", "segments"]