"""
Per-position peptide / TCR contact fractions.
"""

import logging
from typing import Dict, Iterable

import pandas as pd

from hlacontact.models import ContactRecord, Position, PositionInteractionStats, position_sort_key
from hlacontact.utils.stats import safe_ratio

logger = logging.getLogger(__name__)


def count_structures(records: Iterable[ContactRecord]) -> int:
    """Number of distinct structure identifiers"""
    return len({record.structure_id for record in records})


class PositionInteractionAggregator:
    """Fraction of structures showing peptide and TCR contact at each position

    The denominator is the number of distinct structures in the whole input,
    not per position. TCR contact means TCRA or TCRB.
    """

    def aggregate(self, records: Iterable[ContactRecord]) -> Dict[Position, PositionInteractionStats]:
        """Stats for every position present in *records*, in position order"""
        records = list(records)
        if not records:
            return {}

        frame = pd.DataFrame({
            'position': pd.Series([r.residue_id for r in records], dtype=object),
            'structure': pd.Series([r.structure_id for r in records], dtype=object),
            'peptide': [r.has_peptide_contact for r in records],
            'tcr': [r.has_tcr_contact for r in records],
        })

        total = int(frame['structure'].nunique())
        peptide_counts = frame[frame['peptide']].groupby('position', sort=False)['structure'].nunique().to_dict()
        tcr_counts = frame[frame['tcr']].groupby('position', sort=False)['structure'].nunique().to_dict()

        stats: Dict[Position, PositionInteractionStats] = {}
        for position in sorted({r.residue_id for r in records}, key=position_sort_key):
            peptide = int(peptide_counts.get(position, 0))
            tcr = int(tcr_counts.get(position, 0))
            stats[position] = PositionInteractionStats(
                position=position,
                peptide_structures=peptide,
                tcr_structures=tcr,
                total_structures=total,
                peptide_fraction=safe_ratio(peptide, total),
                tcr_fraction=safe_ratio(tcr, total),
            )

        logger.debug(f"Aggregated {len(stats)} positions over {total} structures")
        return stats
