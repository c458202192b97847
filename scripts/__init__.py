"""
COVID-19 Russia Monitor - Utility Scripts

Operator utilities for inspecting the stores.

Scripts:
    export_history: Print the history or the latest record as JSON

Usage:
    python -m scripts.export_history
    python -m scripts.export_history --latest
"""
