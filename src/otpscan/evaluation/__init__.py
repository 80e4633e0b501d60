"""Robustness tooling for exercising the detector."""
