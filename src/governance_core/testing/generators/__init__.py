"""Testing generators – deterministic clock.

Hypothesis strategies live in :mod:`governance_core.testing.generators.strategies`.
"""
from governance_core.testing.generators.step_clock import StepClock

__all__ = ["StepClock"]
