"""Install reconciliation core."""

from .reconciler import InstallOutcome, InstallReconciler, InstallResult, reconcile

__all__ = ["InstallOutcome", "InstallReconciler", "InstallResult", "reconcile"]
