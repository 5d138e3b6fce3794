"""
Opponent catalog loading and browsing.

The catalog is a YAML file, either a bare list of entries or a mapping with an
'opponents' key:

    opponents:
      - name: Raimon (IE1)
        level: 25
        source: Story
        difficulty: Normal

'id' defaults to the name and 'series' to the parenthesised part of the name.
"""
import logging
import os
from typing import Iterable, List, Optional

import yaml

from bracket.errors import CatalogError
from bracket.models import Opponent, RESERVED_IDS

logger = logging.getLogger(__name__)

ALL_SERIES = 'ALL'


def load_catalog(file_path: str) -> List[Opponent]:
    """Load the opponent catalog from a YAML file."""
    if not os.path.exists(file_path):
        raise CatalogError(f"Catalog file not found: {file_path}")
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise CatalogError(f"Failed to parse {file_path}: {e}") from e

    catalog = parse_catalog(data)
    logger.info("Loaded %d opponents from %s", len(catalog), file_path)
    return catalog


def parse_catalog(data) -> List[Opponent]:
    """Turn already-parsed YAML data into an ordered list of opponents."""
    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get('opponents') or []
    if not isinstance(data, list):
        raise CatalogError("Catalog must be a list of opponents or a mapping with an 'opponents' list")

    catalog = []
    seen = set()
    for position, entry in enumerate(data, start=1):
        if not isinstance(entry, dict):
            raise CatalogError(f"Entry #{position} is not a mapping")
        missing = [key for key in ('name', 'level', 'source') if key not in entry]
        if missing:
            raise CatalogError(f"Entry #{position} is missing {', '.join(missing)}")

        name = str(entry['name']).strip()
        opponent_id = str(entry.get('id', name)).strip()
        if opponent_id in RESERVED_IDS:
            raise CatalogError(f"Entry #{position} uses reserved identity '{opponent_id}'")
        if opponent_id in seen:
            raise CatalogError(f"Duplicate opponent identity '{opponent_id}'")
        try:
            level = int(entry['level'])
        except (TypeError, ValueError):
            raise CatalogError(f"Entry '{opponent_id}' has a non-numeric level: {entry['level']!r}")

        seen.add(opponent_id)
        catalog.append(Opponent(
            opponent_id=opponent_id,
            name=name,
            level=level,
            source=str(entry['source']),
            series=entry.get('series'),
            difficulty=str(entry.get('difficulty', 'Normal')),
        ))
    return catalog


def filter_catalog(catalog: Iterable[Opponent], sources: Optional[Iterable[str]] = None,
                   series: Optional[str] = None) -> List[Opponent]:
    """
    Narrow the catalog for display.

    sources=None keeps every source; series=None or 'ALL' keeps every series.
    """
    allowed = set(sources) if sources is not None else None
    result = []
    for opponent in catalog:
        if allowed is not None and opponent.source not in allowed:
            continue
        if series and series != ALL_SERIES and opponent.series != series:
            continue
        result.append(opponent)
    return result


def list_series(catalog: Iterable[Opponent]) -> List[str]:
    """Distinct series tags in catalog order."""
    series = []
    for opponent in catalog:
        if opponent.series and opponent.series not in series:
            series.append(opponent.series)
    return series


def list_sources(catalog: Iterable[Opponent]) -> List[str]:
    sources = []
    for opponent in catalog:
        if opponent.source not in sources:
            sources.append(opponent.source)
    return sources
