"""
Classical and structurally-weighted divergence between allele pairs.
"""

import logging
from typing import Iterable, List, Mapping, Optional, Sequence, Union

from hlacontact.models import AlleleComparison, DivergenceScore, MismatchRecord, Position
from hlacontact.utils.grantham import MAX_GRANTHAM_SCORE
from hlacontact.utils.stats import safe_ratio

logger = logging.getLogger(__name__)

Mismatches = Union[AlleleComparison, Iterable[MismatchRecord]]


def _mismatch_list(mismatches: Mismatches) -> List[MismatchRecord]:
    if isinstance(mismatches, AlleleComparison):
        return list(mismatches.mismatches)
    return list(mismatches)


class DivergenceScorer:
    """
    classical = sum(all substitution scores) / normalization_constant
    specific  = sum(scores at weighted positions) / number of weighted positions

    The normalization constant is fixed per scorer (by default the largest
    Grantham distance) so values are comparable across pairs.
    """

    def __init__(self, normalization_constant: float = MAX_GRANTHAM_SCORE):
        if not normalization_constant or normalization_constant <= 0:
            raise ValueError("normalization_constant must be positive")
        self.normalization_constant = float(normalization_constant)

    def classical(self, mismatches: Mismatches) -> float:
        total = sum(m.substitution_score for m in _mismatch_list(mismatches))
        return safe_ratio(total, self.normalization_constant)

    def specific(self, mismatches: Mismatches, weighting: Mapping[Position, object]) -> float:
        """0 whenever the weighting is empty"""
        if not weighting:
            return 0.0
        total = sum(m.substitution_score for m in _mismatch_list(mismatches) if m.position in weighting)
        return safe_ratio(total, len(weighting))

    def score(self, mismatches: Mismatches, weighting: Mapping[Position, object]) -> DivergenceScore:
        """Raw (un-normalized) divergence for one pair"""
        mismatch_list = _mismatch_list(mismatches)
        return DivergenceScore(
            classical=self.classical(mismatch_list),
            specific=self.specific(mismatch_list, weighting),
        )

    @staticmethod
    def normalize_batch(scores: Sequence[Optional[DivergenceScore]]) -> List[Optional[DivergenceScore]]:
        """Divide each value by the batch maximum of its column

        None entries (unavailable comparisons) are passed through and do not
        take part in the maxima. A zero maximum normalizes to 0.
        """
        available = [s for s in scores if s is not None]
        max_classical = max((s.classical for s in available), default=0.0)
        max_specific = max((s.specific for s in available), default=0.0)
        logger.debug(f"Batch maxima: classical={max_classical:.4f} specific={max_specific:.4f}")

        normalized: List[Optional[DivergenceScore]] = []
        for s in scores:
            if s is None:
                normalized.append(None)
                continue
            normalized.append(DivergenceScore(
                classical=s.classical,
                specific=s.specific,
                normalized_classical=safe_ratio(s.classical, max_classical),
                normalized_specific=safe_ratio(s.specific, max_specific),
            ))
        return normalized
