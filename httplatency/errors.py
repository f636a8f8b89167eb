"""
Exceptions raised by httplatency.

InputError and OutputError end the whole run. ProbeError only concerns one
address and is turned into "no record" by the prober.
"""


class LatencyError(Exception):
    """Base class for every httplatency error."""


class InputError(LatencyError):
    """The address list could not be read."""


class OutputError(LatencyError):
    """The results could not be written."""


class ProbeError(LatencyError):
    def __init__(self, address: str, reason: str):
        self.address = address
        self.reason = reason
        super().__init__(f"Couldn't retrieve {address}: {reason}")
