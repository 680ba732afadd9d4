"""Schemas for upstream responses and gateway results."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Built-in policies; read-only by convention.
BUILTIN_POLICIES = frozenset({"root", "default"})


class Envelope(BaseModel):
    """Upstream body that keeps fields it does not declare (request_id, warnings, ...)."""

    model_config = ConfigDict(extra="allow")


class LoginAuth(BaseModel):
    """The ``auth`` block of a userpass login response."""

    client_token: str
    accessor: str | None = None
    policies: list[str] = []
    token_policies: list[str] = []
    metadata: dict[str, str] | None = None
    lease_duration: int | None = None
    renewable: bool | None = None


class LoginResponse(BaseModel):
    auth: LoginAuth


class KeyListData(Envelope):
    keys: list[str] = []


class KeyList(Envelope):
    """Envelope returned by every LIST call."""

    data: KeyListData = Field(default_factory=KeyListData)

    @property
    def keys(self) -> list[str]:
        return self.data.keys


class SecretMetadata(Envelope):
    """Version metadata of a KV v2 entry."""

    created_time: str | None = None
    custom_metadata: dict[str, str] | None = None
    deletion_time: str | None = None
    destroyed: bool = False
    version: int | None = None


class SecretVersion(Envelope):
    data: dict[str, Any] | None = None
    metadata: SecretMetadata = Field(default_factory=SecretMetadata)


class SecretRead(Envelope):
    """A leaf's current version: ``{data: {data, metadata}}``."""

    data: SecretVersion

    @property
    def values(self) -> dict[str, Any]:
        return self.data.data or {}

    @property
    def metadata(self) -> SecretMetadata:
        return self.data.metadata


class UserData(Envelope):
    policies: list[str] = []
    token_policies: list[str] = []


class UserRead(Envelope):
    """A userpass account. The password is never returned."""

    data: UserData

    @property
    def policies(self) -> list[str]:
        return self.data.token_policies or self.data.policies


class PolicyData(Envelope):
    name: str
    rules: str = ""


class PolicyRead(Envelope):
    data: PolicyData

    @property
    def name(self) -> str:
        return self.data.name

    @property
    def rules(self) -> str:
        return self.data.rules

    @property
    def builtin(self) -> bool:
        return self.data.name in BUILTIN_POLICIES


class LoginResult(BaseModel):
    """Gateway answer to a successful login."""

    success: bool = True
    token: str


class SuccessResponse(BaseModel):
    success: bool = True


class StepResult(BaseModel):
    """Outcome of one sub-operation of a sequenced update."""

    operation: str
    ok: bool
    error: str | None = None


class UserUpdateResult(BaseModel):
    """Report of a user update, listing which sub-operations were applied."""

    success: bool = True
    steps: list[StepResult] = []
