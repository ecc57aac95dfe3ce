"""Workload catalog module."""

from .catalog import DEFAULT_CATALOG, UnknownProfile, WorkloadCatalog, lookup
from .models import Phase, PhaseKind, RequestProfile

__all__ = [
    "Phase",
    "PhaseKind",
    "RequestProfile",
    "WorkloadCatalog",
    "DEFAULT_CATALOG",
    "UnknownProfile",
    "lookup",
]
