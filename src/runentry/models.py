"""Run configuration domain models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing_extensions import NotRequired, TypedDict


class ConfigKind(str, Enum):
    CURRENT_FILE = "current"
    NAMED_FILE = "file"


class RunMode(str, Enum):
    RUN = "run"
    DEBUG = "debug"


class RunConfigPayload(TypedDict):
    name: str
    type: str
    program: NotRequired[str]
    command: NotRequired[str]
    args: NotRequired[str]
    cwd: NotRequired[str]


class RunConfig(BaseModel):
    """A named description of how to run or debug one target file."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    kind: ConfigKind = Field(default=ConfigKind.NAMED_FILE, alias="type")
    program: str | None = None
    command: str | None = None
    args: str | None = None
    cwd: str | None = None

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Configuration name cannot be empty")
        return value

    @model_validator(mode="after")
    def _validate_program(self) -> RunConfig:
        if self.kind == ConfigKind.CURRENT_FILE and self.program:
            raise ValueError("Current-file configurations cannot set a program")
        return self

    @property
    def is_current_file(self) -> bool:
        return self.kind == ConfigKind.CURRENT_FILE

    def to_payload(self) -> RunConfigPayload:
        payload = RunConfigPayload(name=self.name, type=self.kind.value)
        for key in ("program", "command", "args", "cwd"):
            value = getattr(self, key)
            if value is not None:
                payload[key] = value  # type: ignore[literal-required]
        return payload


CURRENT_FILE_CONFIG = RunConfig(name="Current File", kind=ConfigKind.CURRENT_FILE)
