"""
Column-by-column comparison of two allele sequences.

Shared by the single-pair analysis and the batch report so both paths score
mismatches identically.
"""

import logging
from typing import Any, List, Mapping, Optional

from hlacontact.models import (
    AlleleComparison, Locus, MismatchRecord, SequenceRecord, SequenceTable
)
from hlacontact.utils.grantham import GRANTHAM, SubstitutionScoreTable

logger = logging.getLogger(__name__)

# Peptide-binding region: alpha1 + alpha2 domains
DEFAULT_SCAN_LENGTH = 182


class AlleleSequenceComparator:
    """Reports positions where two alleles differ, with substitution costs"""

    def __init__(self, score_table: Optional[SubstitutionScoreTable] = None,
                 scan_length: int = DEFAULT_SCAN_LENGTH):
        if scan_length < 1:
            raise ValueError("scan_length must be positive")
        self.score_table = score_table or GRANTHAM
        self.scan_length = scan_length

    def scanned_positions(self, record1: SequenceRecord, record2: SequenceRecord) -> List[int]:
        """The first scan_length positions present in either record, ascending"""
        positions = sorted(set(record1.residues) | set(record2.residues))
        return positions[:self.scan_length]

    def compare_records(self, record1: SequenceRecord, record2: SequenceRecord,
                        locus: Any) -> AlleleComparison:
        """Compare two resolved records"""
        positions = self.scanned_positions(record1, record2)
        mismatches = []
        for position in positions:
            residue1 = record1.residue_at(position)
            residue2 = record2.residue_at(position)
            if residue1 != residue2:
                mismatches.append(MismatchRecord(
                    position=position,
                    residue1=residue1,
                    residue2=residue2,
                    substitution_score=self.score_table.score(residue1, residue2),
                ))

        return AlleleComparison(
            allele1=record1.allele_id,
            allele2=record2.allele_id,
            locus=Locus.from_value(locus),
            mismatches=tuple(mismatches),
            compared_positions=len(positions),
        )

    def compare(self, allele1: str, allele2: str, locus: Any,
                tables: Mapping[Locus, SequenceTable]) -> Optional[AlleleComparison]:
        """Compare two alleles of *locus*

        Args:
            allele1: First allele identifier
            allele2: Second allele identifier
            locus: Locus whose table holds both alleles
            tables: Locus -> SequenceTable

        Returns:
            AlleleComparison, or None when either allele (or the locus table)
            is unavailable
        """
        locus = Locus.from_value(locus)
        table = tables.get(locus)
        if table is None:
            logger.warning(f"No sequence table for locus {locus.value}; comparison unavailable")
            return None

        record1 = table.get(allele1)
        record2 = table.get(allele2)
        missing = [allele for allele, record in ((allele1, record1), (allele2, record2)) if record is None]
        if missing:
            logger.warning(f"Allele(s) {', '.join(map(str, missing))} not found at locus {locus.value}. "
                           f"Available alleles: {', '.join(table.alleles()[:10])}")
            return None

        comparison = self.compare_records(record1, record2, locus)
        logger.debug(f"{allele1} vs {allele2}: {comparison.mismatch_count} mismatches "
                     f"over {comparison.compared_positions} positions")
        return comparison
