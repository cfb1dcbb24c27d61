"""Digest algorithms available to the transformer.

The set of algorithms is closed: names are matched case-sensitively and
each maps to the hashlib constructor of the same digest.
"""

from __future__ import annotations

import hashlib
from enum import Enum

from hashstream.shared.errors import (
    DigestError,
    ErrorCode,
    ErrorContext,
    UnsupportedAlgorithmError,
)


class Algorithm(str, Enum):
    """Supported digest algorithm names as they appear on the wire."""

    MD5 = "MD5"
    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"


_HASHLIB_NAMES: dict[Algorithm, str] = {
    Algorithm.MD5: "md5",
    Algorithm.SHA1: "sha1",
    Algorithm.SHA256: "sha256",
    Algorithm.SHA512: "sha512",
}

SUPPORTED_ALGORITHMS: tuple[str, ...] = tuple(algorithm.value for algorithm in Algorithm)


def is_supported(name: str) -> bool:
    """Return True if ``name`` is one of the supported algorithm names."""
    return name in SUPPORTED_ALGORITHMS


def resolve_algorithm(name: str) -> Algorithm:
    """Map a wire name to its Algorithm.

    Raises:
        UnsupportedAlgorithmError: If the name is not in the supported set.
    """
    if not is_supported(name):
        raise UnsupportedAlgorithmError(
            ErrorCode.UNSUPPORTED_ALGORITHM,
            f"Unsupported algorithm: {name!r}",
            ErrorContext(
                operation="resolve_algorithm",
                additional_data={"algorithm": str(name)},
            ),
        )
    return Algorithm(name)


def transform(payload: bytes, name: str) -> str:
    """Compute the lowercase hex digest of ``payload`` with algorithm ``name``.

    Args:
        payload: Raw bytes to hash.
        name: Algorithm name, one of SUPPORTED_ALGORITHMS.

    Returns:
        Lowercase hex-encoded digest.

    Raises:
        UnsupportedAlgorithmError: If the name is not supported.
        DigestError: If hashlib cannot compute the digest.
    """
    algorithm = resolve_algorithm(name)
    try:
        return hashlib.new(_HASHLIB_NAMES[algorithm], payload).hexdigest()
    except (TypeError, ValueError) as e:
        # ValueError: digest disabled by the platform (e.g. MD5 under FIPS)
        raise DigestError(
            ErrorCode.DIGEST_FAILED,
            f"Failed to compute {algorithm.value} digest",
            ErrorContext(
                operation="transform",
                additional_data={"algorithm": algorithm.value},
            ),
            original_error=e,
        ) from e


def transform_text(payload: str, name: str) -> str:
    """Digest the UTF-8 encoding of ``payload``.

    Raises:
        UnsupportedAlgorithmError: If the name is not supported.
        DigestError: If the text cannot be encoded or hashed.
    """
    try:
        data = payload.encode("utf-8")
    except UnicodeEncodeError as e:
        raise DigestError(
            ErrorCode.DIGEST_FAILED,
            "Payload is not encodable as UTF-8",
            ErrorContext(operation="transform_text", additional_data={"algorithm": str(name)}),
            original_error=e,
        ) from e
    return transform(data, name)
