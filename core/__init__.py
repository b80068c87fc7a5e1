"""Core (UI-agnostic) IDP dashboard logic.

This package contains:
- sheet fetching and CSV parsing (CSV text -> DevelopmentRecord)
- filter normalization and application
- aggregations and page compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict) and the printable plan
"""
