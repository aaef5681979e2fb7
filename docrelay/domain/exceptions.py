"""Domain exceptions – no infrastructure imports."""

from __future__ import annotations


class RelayError(Exception):
    """Base exception for all relay errors."""


class LatencyBudgetExceeded(RelayError):
    """Raised when a request exceeds the configured latency budget."""

    def __init__(self, elapsed_seconds: float, budget_seconds: float = 90.0):
        super().__init__(
            f"Latency budget exceeded: {elapsed_seconds:.2f}s > {budget_seconds:.2f}s"
        )
        self.elapsed_seconds = elapsed_seconds
        self.budget_seconds = budget_seconds


class AdapterError(RelayError):
    """Raised when an LLM adapter cannot produce text."""
