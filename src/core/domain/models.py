"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation of both CLI input and API payloads at the edge.
- Payloads from the orchestration API carry many more fields than we need;
  the models keep only what the lookup uses and ignore the rest.

Note:
- These models describe *what* the data is, not *how* it is fetched.
"""

from __future__ import annotations

import base64

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator
from pydantic.config import ConfigDict

DEFAULT_OPTIONS = "blue,green"


def code_of(name: str) -> str:
    """Color suffix of a service name: last `-`-delimited token."""

    return name.split("-")[-1]


class LinkedService(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = Field(..., description="Name of the service a load balancer routes to.")


class Service(BaseModel):
    """A service in a stack, as returned by the service endpoint."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = Field(
        ...,
        description="Service name; its last '-' token is the color code (e.g. 'web-blue').",
    )
    linked_to_service: list[LinkedService] = Field(
        default_factory=list,
        description="Services this one is linked to (load balancers link their backend).",
    )

    @field_validator("linked_to_service", mode="before")
    @classmethod
    def _none_is_empty(cls, value: object) -> object:
        return [] if value is None else value

    @property
    def code(self) -> str:
        return code_of(self.name)


class Stack(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = Field(..., description="Stack name.")
    services: list[str] = Field(
        default_factory=list,
        description="Resource paths of the stack's services (e.g. '/api/app/v1/service/<uuid>/').",
    )


class StackList(BaseModel):
    """Stack collection payload (`GET /api/app/v1/stack/`)."""

    model_config = ConfigDict(extra="ignore")

    objects: list[Stack] = Field(default_factory=list)


class Target(BaseModel):
    """`service.stack` pair identifying the deployed service."""

    model_config = ConfigDict(frozen=True)

    service: str = Field(..., min_length=1)
    stack: str = Field(..., min_length=1)

    @classmethod
    def parse(cls, raw: str) -> "Target":
        if not raw or any(ch.isspace() for ch in raw):
            raise ValueError("target must be a non-empty token without whitespace")
        parts = raw.split(".")
        if len(parts) != 2:
            raise ValueError("target must contain exactly one '.' separator")
        return cls(service=parts[0], stack=parts[1])

    def __str__(self) -> str:
        return f"{self.service}.{self.stack}"


class ColorOptions(BaseModel):
    """The two color codes a service may carry, in the order given."""

    model_config = ConfigDict(frozen=True)

    codes: tuple[str, str] = ("blue", "green")

    @model_validator(mode="after")
    def _two_distinct_codes(self) -> "ColorOptions":
        first, second = self.codes
        if not first or not second:
            raise ValueError("color codes must be non-empty")
        if first == second:
            raise ValueError("color codes must be distinct")
        return self

    @classmethod
    def parse(cls, raw: str | None) -> "ColorOptions":
        # An empty value means "use the default", like an absent one.
        parts = (raw or DEFAULT_OPTIONS).split(",")
        if len(parts) != 2:
            raise ValueError("exactly two comma-delimited options are required")
        return cls(codes=(parts[0], parts[1]))

    def __contains__(self, code: object) -> bool:
        return code in self.codes

    def other(self, code: str) -> str:
        """Complement of `code` within the pair."""

        if code not in self.codes:
            raise ValueError(f"{code!r} is not one of {self.quoted()}")
        return self.codes[1] if code == self.codes[0] else self.codes[0]

    def quoted(self) -> str:
        return '"' + '" or "'.join(self.codes) + '"'


class Credentials(BaseModel):
    """Basic-auth credentials for the orchestration API."""

    model_config = ConfigDict(frozen=True)

    user: str = Field(..., min_length=1)
    token: SecretStr

    def authorization_header(self) -> str:
        raw = f"{self.user}:{self.token.get_secret_value()}".encode("utf-8")
        return "Basic " + base64.b64encode(raw).decode("ascii")


class LookupRequest(BaseModel):
    """Validated input of a single lookup."""

    model_config = ConfigDict(frozen=True)

    target: Target
    lb: str = Field(..., min_length=1, description="Load balancer name within the stack.")
    options: ColorOptions = Field(default_factory=ColorOptions)
    credentials: Credentials
    active: bool = Field(
        default=False,
        description="Return the active code instead of the next one.",
    )
