"""Table label helpers and logging setup."""
from __future__ import annotations

import logging
import sys
from typing import Dict, Iterable, List, Tuple

from .defaults import TABLE_LABEL_PREFIX
from .models import Guest

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Send ``dinner_table_match`` log records to stdout."""
    logger = logging.getLogger("dinner_table_match")
    logger.setLevel(level)
    logger.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    logger.addHandler(handler)
    return logger


def table_number(label: str) -> int:
    """Numeric suffix of a label: ``Table-3`` -> 3, ``34-2`` -> 2, else 0."""
    suffix = label.rsplit("-", 1)[-1] if "-" in label else ""
    try:
        return int(suffix)
    except ValueError:
        return 0


def label_sort_key(label: str) -> Tuple[int, str]:
    return table_number(label), label


def table_label(number: int) -> str:
    return f"{TABLE_LABEL_PREFIX}-{number}"


def next_table_label(labels: Iterable[str]) -> str:
    """Label for a new table after the highest numbered existing one."""
    numbers = [table_number(label) for label in labels]
    return table_label(max(numbers, default=0) + 1)


def group_by_table(guests: Iterable[Guest]) -> Dict[str, Tuple[Guest, ...]]:
    """Index guests by table label, ordered by label number.

    Unassigned guests are skipped. The index is rebuilt from the guest list
    on every call and returned as tuples so callers cannot edit it.
    """
    groups: Dict[str, List[Guest]] = {}
    for guest in guests:
        if not guest.table:
            continue
        groups.setdefault(guest.table, []).append(guest)
    return {label: tuple(groups[label]) for label in sorted(groups, key=label_sort_key)}


def table_counts(guests: Iterable[Guest]) -> Dict[str, int]:
    return {label: len(members) for label, members in group_by_table(guests).items()}
