"""Typed records shared by the pipeline components."""

from __future__ import annotations

from hashstream.shared.models.records import Request, Response

__all__ = ["Request", "Response"]
