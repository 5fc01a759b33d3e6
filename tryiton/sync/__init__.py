"""Scope reconciliation."""

from .reconciler import ConsistencyReconciler, ReconcileAction

__all__ = ["ConsistencyReconciler", "ReconcileAction"]
