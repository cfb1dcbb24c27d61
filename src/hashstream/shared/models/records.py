"""Request and response records exchanged by the pipeline stages."""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, model_validator

from hashstream.core.digest import Algorithm

# Strict: numbers, booleans and null never coerce into a valid field
NonEmptyStr = Annotated[str, StringConstraints(strict=True, min_length=1)]


class Request(BaseModel):
    """One decoded input line.

    A Request only exists when all four fields are non-empty strings and
    ``alg`` names a supported algorithm. The algorithm is only read from the
    ``alg`` key. Unknown keys are ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: NonEmptyStr
    user: NonEmptyStr
    algorithm: Algorithm = Field(alias="alg")
    payload: NonEmptyStr


class Response(BaseModel):
    """One output line, correlated to exactly one Request."""

    model_config = ConfigDict(frozen=True)

    id: str
    user: str
    output: str = ""
    success: bool

    @model_validator(mode="after")
    def _failure_has_no_output(self) -> Response:
        if not self.success and self.output:
            msg = "output must be empty when success is false"
            raise ValueError(msg)
        return self

    @classmethod
    def succeeded(cls, request: Request, digest: str) -> Response:
        return cls(id=request.id, user=request.user, output=digest, success=True)

    @classmethod
    def failed(cls, request: Request) -> Response:
        return cls(id=request.id, user=request.user, output="", success=False)


__all__ = ["NonEmptyStr", "Request", "Response"]
