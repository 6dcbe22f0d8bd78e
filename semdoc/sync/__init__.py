"""Drift detection between declared and observed configuration documents.

This package builds on the normalization engine to answer one question for
a lifecycle layer: has the remote configuration really changed, or does it
only look different?
"""
