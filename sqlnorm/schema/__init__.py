"""
Live-schema reconciliation for declared record types.
"""

from sqlnorm.schema.reconciler import LiveColumn, plan_reconcile, read_live_columns, reconcile

__all__ = ["LiveColumn", "plan_reconcile", "read_live_columns", "reconcile"]
