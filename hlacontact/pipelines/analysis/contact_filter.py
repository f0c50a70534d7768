"""
Selection of contact records for one locus and distance threshold.
"""

import logging
from typing import Any, Iterable, List

from hlacontact.models import ContactRecord, Locus

logger = logging.getLogger(__name__)


class ContactFilter:
    """Keeps records at a locus whose distance threshold equals the target

    The threshold match is exact (not <=). With integer_thresholds both sides
    are truncated with int() before comparing. Records scoring below
    min_score are dropped; records without a score count as 1.0.
    """

    def __init__(self, integer_thresholds: bool = False, min_score: float = 0.0):
        self.integer_thresholds = integer_thresholds
        self.min_score = float(min_score)

    def _threshold_matches(self, value: float, target: float) -> bool:
        if self.integer_thresholds:
            return int(value) == int(target)
        return float(value) == float(target)

    def filter(self, records: Iterable[ContactRecord], locus: Any,
               distance_threshold: float) -> List[ContactRecord]:
        """Records matching both locus and threshold

        An empty result means "no data for this combination", not an error.
        """
        locus = Locus.from_value(locus)
        selected = [
            record for record in records
            if record.locus == locus
            and self._threshold_matches(record.threshold, distance_threshold)
            and record.score >= self.min_score
        ]

        if not selected:
            logger.info(f"No contacts for locus {locus.value} at threshold {distance_threshold}")
        else:
            logger.debug(f"Selected {len(selected)} contacts for locus {locus.value} "
                         f"at threshold {distance_threshold}")
        return selected
