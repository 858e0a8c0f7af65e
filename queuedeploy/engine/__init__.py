"""Reconciliation engine: resolver, inspector, binding manager and reconciler."""

from .bindings import BindingManager
from .inspector import RemoteInspector
from .reconciler import ChangeType, Operation, Reconciler, plan_deploy
from .resolver import DEFAULTS, ConfigResolver, merge_deep, resolve, validate

__all__ = [
    "BindingManager",
    "RemoteInspector",
    "ChangeType",
    "Operation",
    "Reconciler",
    "plan_deploy",
    "DEFAULTS",
    "ConfigResolver",
    "merge_deep",
    "resolve",
    "validate",
]
