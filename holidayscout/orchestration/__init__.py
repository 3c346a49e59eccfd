"""
Orchestration of package searches.

This module provides the package search orchestrator and its parts: the
bounded worker pool, the per-destination package assembler, the result
reconciler and cooperative cancellation.
"""

from holidayscout.orchestration.cancellation import CancellationToken, SearchSession
from holidayscout.orchestration.concurrency import map_with_concurrency
from holidayscout.orchestration.package_assembler import PackageAssembler
from holidayscout.orchestration.package_orchestrator import PackageSearchOrchestrator
from holidayscout.orchestration.result_reconciler import reconcile_results

__all__ = [
    "CancellationToken",
    "PackageAssembler",
    "PackageSearchOrchestrator",
    "SearchSession",
    "map_with_concurrency",
    "reconcile_results",
]
