"""
Divergence report over many allele pairs.

Each pair is compared and scored with the shared comparator and scorer; once
every pair has a raw score, the batch maxima are taken and one row per pair
is emitted with raw and batch-normalized values plus the analysis parameters.
"""

import csv
import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from hlacontact.models import (
    AlleleComparison, AnalysisParameters, DivergenceScore, Locus, PositionWeighting,
    SequenceTable, sorted_positions
)
from .comparator import AlleleSequenceComparator
from .divergence import DivergenceScorer

logger = logging.getLogger(__name__)

REPORT_HEADER = (
    'Pair1',
    'Pair2',
    'Classical Divergence',
    'Specific Divergence',
    'Normalized Classical Divergence (0-1)',
    'Normalized Specific Divergence (0-1)',
    'Locus',
    'Distance Threshold (Å)',
    'Percentage Threshold (%)',
    'Interaction Type',
    'Selected Positions',
)


def _format_decimal(value: Optional[float], places: int) -> Optional[str]:
    if value is None:
        return None
    return f"{value:.{places}f}"


def _format_number(value: Any) -> Any:
    """3.0 -> '3', 2.5 -> '2.5'"""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return value


@dataclass
class PairResult:
    """Outcome for one allele pair; comparison/divergence are None when unavailable"""
    allele1: str
    allele2: str
    locus: Optional[Locus] = None
    comparison: Optional[AlleleComparison] = None
    divergence: Optional[DivergenceScore] = None

    @property
    def available(self) -> bool:
        return self.comparison is not None


@dataclass
class BatchReport:
    """Header plus one fixed-order row per pair"""
    header: Tuple[str, ...] = REPORT_HEADER
    rows: List[List[Any]] = field(default_factory=list)
    results: List[PairResult] = field(default_factory=list)

    def to_rows(self) -> List[List[Any]]:
        """Header row followed by the data rows"""
        return [list(self.header)] + [list(row) for row in self.rows]

    def to_csv_text(self, separator: str = ",") -> str:
        """Delimited text; fields containing the separator are quoted, None is empty"""
        buffer = io.StringIO()
        writer = csv.writer(buffer, delimiter=separator, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
        writer.writerows(self.to_rows())
        return buffer.getvalue().rstrip("\n")

    def write(self, path: Union[str, Path], separator: str = ",") -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_csv_text(separator) + "\n", encoding="utf-8")
        return path

    @property
    def available_count(self) -> int:
        return sum(1 for r in self.results if r.available)


class BatchReportGenerator:
    """Runs comparison and scoring over a list of allele pairs"""

    def __init__(self, comparator: Optional[AlleleSequenceComparator] = None,
                 scorer: Optional[DivergenceScorer] = None):
        self.comparator = comparator or AlleleSequenceComparator()
        self.scorer = scorer or DivergenceScorer()

    def score_pair(self, allele1: str, allele2: str, tables: Mapping[Locus, SequenceTable],
                   weighting: PositionWeighting) -> PairResult:
        """Raw score for one pair; the locus comes from allele1's prefix"""
        try:
            locus = Locus.from_allele(allele1)
        except ValueError:
            logger.warning(f"Cannot infer locus from allele {allele1}; skipping comparison")
            return PairResult(allele1=allele1, allele2=allele2)

        comparison = self.comparator.compare(allele1, allele2, locus, tables)
        if comparison is None:
            return PairResult(allele1=allele1, allele2=allele2, locus=locus)

        return PairResult(
            allele1=allele1,
            allele2=allele2,
            locus=locus,
            comparison=comparison,
            divergence=self.scorer.score(comparison, weighting),
        )

    def generate(self, pairs: Iterable[Sequence[str]], tables: Mapping[Locus, SequenceTable],
                 weighting: PositionWeighting,
                 parameters: Optional[AnalysisParameters] = None) -> BatchReport:
        """Build the report

        Args:
            pairs: (allele1, allele2) tuples
            tables: Locus -> SequenceTable
            weighting: Active PositionWeighting used for specific divergence
            parameters: Active analysis parameters, repeated on every row

        Returns:
            BatchReport; header-only when there are no pairs
        """
        results: List[PairResult] = []
        for pair in pairs:
            if len(pair) != 2:
                logger.warning(f"Skipping malformed pair {pair!r}")
                continue
            allele1, allele2 = (str(a).strip() for a in pair)
            logger.debug(f"Processing pair: {allele1} - {allele2}")
            results.append(self.score_pair(allele1, allele2, tables, weighting))

        normalized = self.scorer.normalize_batch([r.divergence for r in results])
        for result, score in zip(results, normalized):
            result.divergence = score

        metadata = self._metadata(parameters, weighting)
        rows = [self._row(result, metadata) for result in results]

        report = BatchReport(rows=rows, results=results)
        logger.info(f"Batch report: {len(results)} pairs, {report.available_count} scored")
        return report

    @staticmethod
    def _metadata(parameters: Optional[AnalysisParameters], weighting: PositionWeighting) -> List[Any]:
        selected = ", ".join(str(p) for p in sorted_positions(weighting))
        if parameters is None:
            return [None, None, None, None, selected]
        return [
            parameters.locus.value,
            _format_number(parameters.distance_threshold),
            _format_number(parameters.percentage_threshold),
            parameters.interaction_type.value,
            selected,
        ]

    @staticmethod
    def _row(result: PairResult, metadata: List[Any]) -> List[Any]:
        score = result.divergence
        return [
            result.allele1,
            result.allele2,
            _format_decimal(score.classical if score else None, 2),
            _format_decimal(score.specific if score else None, 2),
            _format_decimal(score.normalized_classical if score else None, 3),
            _format_decimal(score.normalized_specific if score else None, 3),
        ] + metadata
