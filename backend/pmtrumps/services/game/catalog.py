import csv
import logging
from typing import Iterable, Mapping, Tuple

from pmtrumps.models import Card

logger = logging.getLogger(__name__)

STAT_LABELS = {
    'TimeInOfficeDays': 'Time in Office',
    'AgeAtPM': 'Age at PM',
    'TimeAsMPYears': 'Time as MP',
    'Peerage': 'Peerage',
    'Age': 'Age',
}

CATEGORICAL_STAT = 'Peerage'

NAME_COLUMN = 'Name'
IMAGE_COLUMN = 'ImageFileName'


def stat_label(stat_id) -> str:
    return STAT_LABELS.get(stat_id) or str(stat_id)


def catalog_stats(cards: Iterable[Card]) -> Tuple[str, ...]:
    """Playable statistics: the labelled ones, then any other column the cards carry."""
    stats = list(STAT_LABELS)
    for card in cards:
        stats.extend(key for key in card.stats if key not in stats)
    return tuple(stats)


def is_valid_row(row: Mapping[str, str]) -> bool:
    """A row is playable only when it has an image to show."""
    image = row.get(IMAGE_COLUMN)
    return bool(image and str(image).strip())


def card_from_row(row: Mapping[str, str]) -> Card:
    stats = {
        key: value
        for key, value in row.items()
        if key not in (NAME_COLUMN, IMAGE_COLUMN) and key is not None
    }
    return Card(
        name=(row.get(NAME_COLUMN) or '').strip(),
        image=str(row.get(IMAGE_COLUMN)).strip(),
        stats=stats,
    )


def build_catalog(rows: Iterable[Mapping[str, str]]) -> Tuple[Card, ...]:
    return tuple(card_from_row(row) for row in rows if row and is_valid_row(row))


def load_catalog(path) -> Tuple[Card, ...]:
    """Read the card CSV at ``path`` and return the valid cards in file order.

    Rows without an ``ImageFileName`` are skipped. I/O and CSV errors are
    raised to the caller.
    """
    with open(path, newline='', encoding='utf-8-sig') as fh:
        reader = csv.DictReader(fh)
        rows = [row for row in reader if any((v or '').strip() for v in row.values() if isinstance(v, str))]
    cards = build_catalog(rows)
    logger.info(f"[catalog] loaded {len(cards)} valid cards from {path} ({len(rows) - len(cards)} skipped)")
    return cards
