"""TruthCheck demo core: analysis request lifecycle and verdict presentation."""

__version__ = "0.1.0"
