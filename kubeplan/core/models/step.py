"""
Plan step models — the unit of work handed to a runner.

A Plan is an ordered list of steps. Order is significant: runners
execute steps strictly in sequence and stop at the first failure.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

# Any Kubernetes object as a plain mapping. Only ``kind`` and
# ``metadata.name`` are ever inspected.
TargetObject = dict[str, Any]

DEFAULT_WAIT_TIMEOUT = 300


def object_kind(obj: TargetObject) -> str:
    return str(obj.get("kind", ""))


def object_name(obj: TargetObject) -> str | None:
    metadata = obj.get("metadata") or {}
    name = metadata.get("name")
    return str(name) if name is not None else None


class Wait(BaseModel):
    """A readiness condition on a named resource."""

    model_config = ConfigDict(frozen=True)

    kind: str
    name: str
    timeout: int | None = Field(default=None, ge=0)   # seconds; None or 0 → default

    @property
    def effective_timeout(self) -> int:
        return self.timeout or DEFAULT_WAIT_TIMEOUT


class DeployStep(BaseModel):
    """Apply one object produced by a module's generator."""

    model_config = ConfigDict(frozen=True)

    type: Literal["deploy"] = "deploy"
    module: str
    object: TargetObject

    @property
    def kind(self) -> str:
        return object_kind(self.object)

    @property
    def name(self) -> str | None:
        return object_name(self.object)


class WaitStep(BaseModel):
    """Block until a resource a module relies on is ready."""

    model_config = ConfigDict(frozen=True)

    type: Literal["wait"] = "wait"
    module: str
    wait: Wait


Step = Annotated[Union[DeployStep, WaitStep], Field(discriminator="type")]
Plan = list[Step]
