"""Pipeline stage components.

- RequestDecoder: Reads input lines into Requests
- Transformer: Computes a Response per Request
- ResponseEncoder: Writes Responses as output lines
"""

from __future__ import annotations

from hashstream.core.pipeline.components.decoder import RequestDecoder
from hashstream.core.pipeline.components.encoder import ResponseEncoder
from hashstream.core.pipeline.components.stage import PipelineStage
from hashstream.core.pipeline.components.transformer import Transformer

__all__ = [
    "PipelineStage",
    "RequestDecoder",
    "ResponseEncoder",
    "Transformer",
]
