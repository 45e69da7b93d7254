"""Dependency declaration advice computed from observed usage."""

from depadvice.advice import AdviceResult, compute_advice

__all__ = ["AdviceResult", "compute_advice"]
