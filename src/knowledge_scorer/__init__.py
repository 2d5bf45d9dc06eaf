"""Quality scoring for problem/solution knowledge pairs."""

__version__ = "0.1.0"
