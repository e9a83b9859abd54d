"""ENS Hunter: rate-limited bulk availability checks for ENS names."""

__version__ = "0.1.0"
