"""Common schemas for the API."""

import typing as t

from ninja import Schema
from pydantic import StringConstraints

OneToOneFiftyString = t.Annotated[str, StringConstraints(min_length=1, max_length=150, strip_whitespace=True)]
CodeString = t.Annotated[str, StringConstraints(min_length=4, max_length=32, strip_whitespace=True)]


class VersionResponse(Schema):
    version: str


class ResponseOk(Schema):
    status: t.Literal["ok"] = "ok"
