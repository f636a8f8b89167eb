"""
Reads the address list and writes the latency results as JSON.
"""

import json
from pathlib import Path
from typing import Iterable, List, Union

import structlog

from .errors import InputError, OutputError
from .models import LatencyRecord

logger = structlog.get_logger(__name__)

DEFAULT_OUTPUT = "output.json"

PathLike = Union[str, Path]


def read_addresses(path: PathLike) -> List[str]:
    """Return every line of ``path`` as-is, without the line ending.

    Raises:
        InputError: the file could not be opened or decoded
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            addresses = [line.rstrip("\n") for line in f]
    except (OSError, UnicodeDecodeError) as e:
        raise InputError(f"Unable to open file: {path}. {e}") from e

    logger.debug("addresses_loaded", path=str(path), count=len(addresses))
    return addresses


def write_records(path: PathLike, records: Iterable[LatencyRecord]):
    """Write ``records`` as a pretty printed JSON array.

    Raises:
        OutputError: the file could not be written
    """
    payload = [record.to_dict() for record in records]
    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(payload, f, indent=2)
            f.write("\n")
    except OSError as e:
        raise OutputError(f"Error writing to file: {path}. {e}") from e

    logger.debug("output_written", path=str(path), count=len(payload))
