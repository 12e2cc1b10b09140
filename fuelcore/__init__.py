"""Core (UI-agnostic) fleet fuel dashboard logic.

This package contains:
- CSV loading (CSV -> pandas, all cells as strings)
- numeric coercion with parseFloat-style prefix parsing
- summary metrics and ranked subsets (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
- process-local session state (theme flag + fleet snapshot)
"""
