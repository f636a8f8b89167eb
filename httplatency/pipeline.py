"""
Implements the measurement flow for a list of addresses:
- canonicalize → drop rejected → probe → drop failed

Results keep the order of the input. With workers > 1 the probes run on a
thread pool and are joined back in input order.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List

import structlog

from .canonicalizer import canonicalize
from .models import LatencyRecord
from .prober import HTTPProber

logger = structlog.get_logger(__name__)


class LatencyPipeline:
    """Measures latency for every address that canonicalizes and answers"""

    def __init__(self, prober: HTTPProber, workers: int = 1, log=None):
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")
        self.prober = prober
        self.workers = workers
        self.log = log or logger

    def canonicalize_all(self, raw_addresses: Iterable[str]) -> List[str]:
        addresses = []
        for raw in raw_addresses:
            address = canonicalize(raw, log=self.log)
            if address is not None:
                addresses.append(address)
        return addresses

    def run(self, raw_addresses: Iterable[str]) -> List[LatencyRecord]:
        addresses = self.canonicalize_all(raw_addresses)
        self.log.info("addresses_canonicalized", count=len(addresses))

        if self.workers == 1:
            results = [self.prober.probe(address) for address in addresses]
        else:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                # map yields in submission order
                results = list(executor.map(self.prober.probe, addresses))

        records = [record for record in results if record is not None]
        self.log.info("all_requests_complete", probed=len(addresses), succeeded=len(records))
        return records
