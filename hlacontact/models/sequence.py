"""
Allele sequence records and per-locus sequence tables.

Two row shapes are accepted:

* column-per-position, as in aligned allele tables: an allele key column
  ("AA" or "Allele") followed by numeric column headers "1", "2", ...
* whole-sequence rows: "Allele" plus a "Sequence" string, where the residue at
  position i is the i-th character.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from hlacontact.exceptions import AlleleNotFoundError, MalformedRowError
from hlacontact.models.base import first_present, is_missing, parse_int_key

logger = logging.getLogger(__name__)

MAX_POSITION = 341

ALLELE_KEYS = ('AA', 'Allele', 'allele', 'allele_id')
SEQUENCE_KEYS = ('Sequence', 'sequence')


def _normalize_residue(value: Any) -> Optional[str]:
    if is_missing(value):
        return None
    return str(value).strip().upper()


@dataclass(frozen=True)
class SequenceRecord:
    """Residues of one allele keyed by 1-based position"""
    allele_id: str
    residues: Dict[int, Optional[str]] = field(default_factory=dict)

    def residue_at(self, position: int) -> Optional[str]:
        return self.residues.get(position)

    @property
    def positions(self) -> List[int]:
        """Positions in ascending numeric order"""
        return sorted(self.residues)

    @property
    def sequence(self) -> str:
        """Residues concatenated in position order, '-' for empty cells"""
        return "".join(self.residues[p] or "-" for p in self.positions)

    @classmethod
    def from_row(cls, row: Mapping[str, Any], max_position: int = MAX_POSITION) -> 'SequenceRecord':
        """Create a record from either supported row shape

        Args:
            row: Field-keyed row
            max_position: Highest valid position; columns outside (0, max_position] are ignored

        Returns:
            SequenceRecord instance

        Raises:
            MalformedRowError: If the row has no allele identifier or no residues
        """
        allele = first_present(row, ALLELE_KEYS)
        if allele is None:
            raise MalformedRowError("Sequence row has no allele identifier")
        allele_id = str(allele).strip()

        sequence = first_present(row, SEQUENCE_KEYS)
        residues: Dict[int, Optional[str]] = {}
        if isinstance(sequence, str):
            cleaned = re.sub(r"\s", "", sequence).upper()
            for index, residue in enumerate(cleaned[:max_position], start=1):
                residues[index] = residue
        else:
            for key, value in row.items():
                position = parse_int_key(key)
                if position is None or not 0 < position <= max_position:
                    continue
                residues[position] = _normalize_residue(value)

        if not residues:
            raise MalformedRowError(f"Sequence row for {allele_id} has no residue columns",
                                    {'allele': allele_id})

        return cls(allele_id=allele_id, residues=residues)


class SequenceTable:
    """Index from allele identifier to its SequenceRecord for one locus"""

    def __init__(self, records: Iterable[SequenceRecord] = (), rejected: int = 0):
        self._records: List[SequenceRecord] = []
        self._index: Dict[str, SequenceRecord] = {}
        self._folded: Dict[str, SequenceRecord] = {}
        self.rejected = rejected

        for record in records:
            if record.allele_id in self._index:
                logger.debug(f"Duplicate allele {record.allele_id}, keeping the last row")
            else:
                self._records.append(record)
            self._index[record.allele_id] = record
            self._folded[record.allele_id.lower()] = record

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping[str, Any]],
                  max_position: int = MAX_POSITION) -> 'SequenceTable':
        """Build a table, skipping (and counting) rows without allele or residues"""
        records: List[SequenceRecord] = []
        rejected = 0
        for row in rows:
            try:
                records.append(SequenceRecord.from_row(row, max_position=max_position))
            except MalformedRowError as e:
                rejected += 1
                logger.debug(f"Skipping sequence row: {e.message}")

        if rejected:
            logger.warning(f"Rejected {rejected} sequence rows, kept {len(records)}")
        return cls(records, rejected=rejected)

    def get(self, allele_id: str) -> Optional[SequenceRecord]:
        """Record for *allele_id* (exact match first, then case-insensitive)"""
        if allele_id is None:
            return None
        key = str(allele_id).strip()
        record = self._index.get(key)
        if record is None:
            record = self._folded.get(key.lower())
        return record

    def require(self, allele_id: str) -> SequenceRecord:
        """Like get, but raises AlleleNotFoundError when absent"""
        record = self.get(allele_id)
        if record is None:
            raise AlleleNotFoundError(f"Allele {allele_id} not found",
                                      {'allele': allele_id, 'available': self.alleles()[:10]})
        return record

    def alleles(self) -> List[str]:
        """Unique allele identifiers in load order"""
        return [record.allele_id for record in self._records]

    @property
    def records(self) -> Tuple[SequenceRecord, ...]:
        return tuple(self._index[record.allele_id] for record in self._records)

    def __contains__(self, allele_id: object) -> bool:
        return isinstance(allele_id, str) and self.get(allele_id) is not None

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[SequenceRecord]:
        return iter(self.records)
