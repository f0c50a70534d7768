"""
Per-position sequence entropy, by locus.
"""

import logging
from typing import Any, Dict, Iterable, Mapping, Optional

from hlacontact.models.base import Position, first_present, normalize_position, position_sort_key
from hlacontact.models.contact import Locus
from hlacontact.utils.stats import shannon_entropy

logger = logging.getLogger(__name__)


class EntropyTable:
    """Mapping locus -> (position -> entropy)"""

    def __init__(self, values: Optional[Mapping[Any, Mapping[Any, float]]] = None):
        self._values: Dict[Locus, Dict[Position, float]] = {locus: {} for locus in Locus}
        for locus, positions in (values or {}).items():
            target = self._values[Locus.from_value(locus)]
            for position, entropy in positions.items():
                target[normalize_position(position)] = float(entropy)

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping[str, Any]]) -> 'EntropyTable':
        """Build from rows with Locus / Position / Entropy columns

        Rows for other loci or with unparseable values are skipped.
        """
        values: Dict[Locus, Dict[Position, float]] = {locus: {} for locus in Locus}
        skipped = 0
        for row in rows:
            locus = first_present(row, ('Locus', 'locus'))
            position = first_present(row, ('Position', 'position'))
            entropy = first_present(row, ('Entropy', 'entropy'))
            if locus is None or position is None or entropy is None:
                skipped += 1
                continue
            try:
                values[Locus.from_value(locus)][normalize_position(position)] = float(entropy)
            except (TypeError, ValueError):
                skipped += 1

        if skipped:
            logger.warning(f"Skipped {skipped} entropy rows")
        return cls(values)

    @classmethod
    def from_sequence_tables(cls, tables: Mapping[Locus, Any]) -> 'EntropyTable':
        """Compute Shannon entropy per position across all alleles of each locus

        Args:
            tables: Locus -> SequenceTable

        Returns:
            EntropyTable over every position present in any allele
        """
        values: Dict[Locus, Dict[Position, float]] = {}
        for locus, table in tables.items():
            records = list(table)
            positions = sorted({p for record in records for p in record.residues})
            values[Locus.from_value(locus)] = {
                position: shannon_entropy(record.residue_at(position) for record in records)
                for position in positions
            }
            logger.debug(f"Computed entropy for {len(positions)} positions at locus {locus}")
        return cls(values)

    def for_locus(self, locus: Any) -> Dict[Position, float]:
        """Copy of the position -> entropy slice for *locus*"""
        return dict(self._values[Locus.from_value(locus)])

    def to_rows(self):
        """Flat Locus/Position/Entropy rows, sorted by locus then position"""
        rows = []
        for locus in Locus:
            for position in sorted(self._values[locus], key=position_sort_key):
                rows.append({'Locus': locus.value, 'Position': position,
                             'Entropy': self._values[locus][position]})
        return rows

    def __len__(self) -> int:
        return sum(len(v) for v in self._values.values())
