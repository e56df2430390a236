"""
Service Layer Package

- InsightsService: pure report builder over episode snapshots
- InsightsRunner: async wrapper that computes reports off the event loop
  with last-write-wins semantics
"""

from aurae.services.insights_service import InsightsService, MINIMUM_LOGS, build_report
from aurae.services.insights_runner import InsightsRunner

__all__ = [
    "InsightsService",
    "InsightsRunner",
    "MINIMUM_LOGS",
    "build_report",
]
