"""Proof-of-place scoring: explainable confidence that a post came from where it claims."""

__version__ = "0.1.0"
