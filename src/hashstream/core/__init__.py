"""
Core components for hashstream.

- digest: The closed set of digest algorithms
- pipeline: The decoder/transformer/encoder pipeline and its service
"""
