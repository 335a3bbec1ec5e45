"""
Domain models — Pydantic types for modules and plans.

All models are re-exported here for convenient access:

    from kubeplan.core.models import Module, Wait, DeployStep, WaitStep, Plan
"""

from kubeplan.core.models.module import Module, SourceGenerator
from kubeplan.core.models.step import (
    DEFAULT_WAIT_TIMEOUT,
    DeployStep,
    Plan,
    Step,
    TargetObject,
    Wait,
    WaitStep,
)

__all__ = [
    "DEFAULT_WAIT_TIMEOUT",
    "DeployStep",
    # module.py
    "Module",
    "Plan",
    "SourceGenerator",
    # step.py
    "Step",
    "TargetObject",
    "Wait",
    "WaitStep",
]
