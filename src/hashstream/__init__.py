"""
hashstream - Line-oriented Hashing Service

Reads JSON requests line by line, computes the requested digest of each
payload and writes JSON responses in request order.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
