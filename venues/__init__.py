"""Core (UI-agnostic) venue dashboard logic.

This package contains:
- field parsing and row normalization (XLSX row -> CanonicalRecord)
- data loading (XLSX -> records, cached / async store)
- facets and the filter predicate engine
- view payload functions (JSON-serializable)
- chart helpers (Altair -> Vega-Lite spec dict) and CSV export
"""
