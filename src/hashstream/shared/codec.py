"""
Line codec for requests and responses.

Each line carries exactly one JSON object. Decoding validates the object
into a Request; encoding renders a Response as compact JSON bytes without
the trailing newline.
"""

from __future__ import annotations

from typing import Any

import orjson
from pydantic import ValidationError

from hashstream.shared.errors import (
    ErrorCode,
    ErrorContext,
    RequestDecodeError,
    ResponseEncodeError,
)
from hashstream.shared.models import Request, Response


class LineCodec:
    """Converts between raw lines and typed records.

    Stateless; the pipeline components receive an instance so tests can
    substitute a failing codec.

    Usage:
        >>> codec = LineCodec()
        >>> request = codec.decode_request(
        ...     b'{"id":"1","user":"u","alg":"MD5","payload":"abc"}'
        ... )
        >>> request.algorithm.value
        'MD5'
    """

    @staticmethod
    def decode_request(line: bytes | str) -> Request:
        """Decode one input line into a validated Request.

        Args:
            line: Raw line, with or without its terminator.

        Returns:
            The validated Request.

        Raises:
            RequestDecodeError: If the line is blank, is not a JSON object,
                or fails field validation.
        """
        if not line.strip():
            raise RequestDecodeError(
                ErrorCode.PARSING_ERROR,
                "Blank input line",
                ErrorContext(operation="decode_request"),
            )

        try:
            data: Any = orjson.loads(line)
        except orjson.JSONDecodeError as e:
            raise RequestDecodeError(
                ErrorCode.PARSING_ERROR,
                "Input line is not valid JSON",
                ErrorContext(operation="decode_request"),
                original_error=e,
            ) from e

        if not isinstance(data, dict):
            raise RequestDecodeError(
                ErrorCode.PARSING_ERROR,
                f"Input line is a JSON {type(data).__name__}, expected an object",
                ErrorContext(operation="decode_request"),
            )

        try:
            return Request.model_validate(data)
        except ValidationError as e:
            request_id = data.get("id")
            raise RequestDecodeError(
                ErrorCode.VALIDATION_ERROR,
                f"Invalid request: {e.error_count()} validation error(s)",
                ErrorContext(
                    request_id=request_id if isinstance(request_id, str) else None,
                    operation="decode_request",
                    additional_data={
                        "fields": ",".join(
                            str(err["loc"][0]) for err in e.errors() if err["loc"]
                        ),
                    },
                ),
                original_error=e,
            ) from e

    @staticmethod
    def encode_response(response: Response) -> bytes:
        """Encode a Response as one JSON line (without the newline).

        Raises:
            ResponseEncodeError: If the response cannot be serialized.
        """
        try:
            return orjson.dumps(response.model_dump(mode="json"))
        except (orjson.JSONEncodeError, TypeError, ValueError) as e:
            raise ResponseEncodeError(
                ErrorCode.SERIALIZATION_ERROR,
                "Failed to encode response",
                ErrorContext(
                    request_id=getattr(response, "id", None),
                    operation="encode_response",
                ),
                original_error=e,
            ) from e


__all__ = ["LineCodec"]
