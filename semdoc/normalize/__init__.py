"""Normalization passes over Document Trees.

- canonical: recursive key sorting and deterministic serialization
- durations: minimal spelling of duration literals
- defaults: rule-driven insertion of server-omitted default fields
"""
