"""
Result records produced by the prober
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class LatencyRecord:
    """The address that was measured and how long it took to answer."""

    url: str
    latency_ms: int

    def __post_init__(self):
        if self.latency_ms < 0:
            raise ValueError(f"latency_ms must be >= 0, got {self.latency_ms}")

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "latency_ms": self.latency_ms}
