"""
Module model — an atomic, named deployment unit.

A module declares which other modules must be deployed before it,
a generator producing its Kubernetes objects from a Context, and a
list of readiness waits confirmed before its objects are applied.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kubeplan.core.models.step import TargetObject, Wait

if TYPE_CHECKING:
    from kubeplan.core.context import Context

SourceGenerator = Callable[["Context"], Iterable[TargetObject]]


def no_objects(_: Context) -> list[TargetObject]:
    """Default generator: a module that only waits."""
    return []


class Module(BaseModel):
    """A deployment unit. Immutable once constructed.

    ``deps`` is stored sorted and de-duplicated so that every
    order-sensitive algorithm downstream is deterministic.

        Module("api", deps=["db", "cache"], generator=make_api,
               waits=[Wait(kind="Job", name="migrate")])
    """

    model_config = ConfigDict(frozen=True)

    name: str
    deps: tuple[str, ...] = ()
    generator: Callable[..., Any] = Field(default=no_objects, repr=False)
    waits: tuple[Wait, ...] = ()

    def __init__(self, name: str, /, **data: Any) -> None:
        super().__init__(name=name, **data)

    @field_validator("deps", mode="before")
    @classmethod
    def _sorted_deps(cls, value: Any) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            return (value,)
        return tuple(sorted(set(value)))

    @field_validator("waits", mode="before")
    @classmethod
    def _tuple_waits(cls, value: Any) -> tuple[Any, ...]:
        return tuple(value or ())
