"""Seating optimizer package."""
from .models import Guest, Table, Relationship, Constraint, Violation, OptimizationResult
from .csv_loader import (
    attending,
    load_guests,
    load_relationships,
    load_tables,
    load_constraints,
    load_all,
)
from .optimizer import SeatingOptimizer, optimize
from .report import table_report, unseated_guests

__all__ = [
    "Guest",
    "Table",
    "Relationship",
    "Constraint",
    "Violation",
    "OptimizationResult",
    "attending",
    "load_guests",
    "load_relationships",
    "load_tables",
    "load_constraints",
    "load_all",
    "SeatingOptimizer",
    "optimize",
    "table_report",
    "unseated_guests",
]
