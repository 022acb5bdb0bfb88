"""
Input Manager (JSON)
Loads the static chart data file into immutable ChartEntry records.
"""
import json
import logging
import os
from typing import Any, Dict, Iterable, List

from factchart.errors import ChartDataError
from factchart.model.entries import ChartEntry

# Get module logger
logger = logging.getLogger(__name__)


def parse_chart_entries(raw: Any) -> List[ChartEntry]:
    """
    Converts decoded JSON into entries.

    Each entry is parsed in isolation: a malformed entry or a duplicate id is
    logged and skipped, the rest still load.

    Raises:
        ChartDataError: If `raw` is not a list.
    """
    if not isinstance(raw, list):
        raise ChartDataError(f"Chart data must be a list of entries, got {type(raw).__name__}")

    entries: List[ChartEntry] = []
    seen: set[str] = set()
    for index, item in enumerate(raw):
        try:
            entry = ChartEntry.from_dict(item)
        except ValueError as e:
            logger.error(f"Skipping chart entry #{index}: {e}")
            continue

        if entry.id in seen:
            logger.error(f"Skipping chart entry #{index}: duplicate id '{entry.id}'")
            continue
        seen.add(entry.id)
        entries.append(entry)

    logger.debug(f"Parsed {len(entries)} of {len(raw)} chart entries.")
    return entries


def load_chart_entries(filepath: str) -> List[ChartEntry]:
    logger.info(f"Loading chart data from: {filepath}")
    if not os.path.exists(filepath):
        msg = f"Chart data file '{filepath}' does not exist."
        logger.error(msg)
        raise ChartDataError(msg)

    try:
        with open(filepath, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        logger.exception(f"Failed to decode chart data: {e}")
        raise ChartDataError(f"File '{filepath}' is not valid JSON: {e}") from e

    entries = parse_chart_entries(raw)
    logger.info(f"Loaded {len(entries)} chart entries.")
    return entries


def index_entries(entries: Iterable[ChartEntry]) -> Dict[str, ChartEntry]:
    """Maps entry id to entry; slots without a key render as placeholders."""
    return {entry.id: entry for entry in entries}
