"""
Structural contact records and per-position interaction statistics.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, FrozenSet, Iterable, List, Mapping, Tuple

from hlacontact.exceptions import MalformedRowError
from hlacontact.models.base import Position, first_present, is_missing, normalize_position

logger = logging.getLogger(__name__)

PEPTIDE_CHAIN = "Peptide"
TCR_CHAINS = frozenset({"TCRA", "TCRB"})

_CHAIN_TOKEN = re.compile(r"[A-Za-z0-9_]+")


class Locus(str, Enum):
    """HLA class I gene family"""
    A = "A"
    B = "B"

    @classmethod
    def from_value(cls, value: Any) -> 'Locus':
        """Parse 'A', 'b', 'HLA-A' or a Locus"""
        if isinstance(value, cls):
            return value
        text = str(value).strip().upper()
        if text.startswith("HLA-"):
            text = text[4:]
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"Invalid locus: {value!r}. Must be one of: "
                             f"{', '.join(l.value for l in cls)}") from None

    @classmethod
    def from_allele(cls, allele_id: str) -> 'Locus':
        """Locus from an allele identifier prefix ('A*02:01' -> A)"""
        text = str(allele_id).strip().upper()
        if text.startswith("HLA-"):
            text = text[4:]
        return cls.from_value(text[:1])


class InteractionType(str, Enum):
    """Classification policy for contact positions"""
    PEPTIDE = "Peptide"
    TCR = "TCR"
    PEPTIDE_AND_TCR = "Peptide+TCR"
    PEPTIDE_OR_TCR = "Peptide-or-TCR"

    @classmethod
    def from_value(cls, value: Any) -> 'InteractionType':
        """Parse a policy name, tolerating spacing ('Peptide + TCR', 'Peptide or TCR')"""
        if isinstance(value, cls):
            return value
        key = re.sub(r"\s+", "", str(value)).lower()
        aliases = {
            "peptide": cls.PEPTIDE,
            "tcr": cls.TCR,
            "peptide+tcr": cls.PEPTIDE_AND_TCR,
            "peptideandtcr": cls.PEPTIDE_AND_TCR,
            "peptide-or-tcr": cls.PEPTIDE_OR_TCR,
            "peptideortcr": cls.PEPTIDE_OR_TCR,
        }
        if key not in aliases:
            raise ValueError(f"Invalid interaction type: {value!r}. Must be one of: "
                             f"{', '.join(t.value for t in cls)}")
        return aliases[key]


class PositionLabel(str, Enum):
    """Label attached to a selected position"""
    PEPTIDE = "Peptide"
    TCR = "TCR"
    PEPTIDE_AND_TCR = "Peptide+TCR"


def parse_chains(value: Any) -> FrozenSet[str]:
    """Chain labels from a list/set or a delimited string ("Peptide,TCRA")"""
    if is_missing(value):
        return frozenset()
    if isinstance(value, (list, tuple, set, frozenset)):
        return frozenset(str(v).strip() for v in value if not is_missing(v))
    return frozenset(_CHAIN_TOKEN.findall(str(value)))


@dataclass(frozen=True)
class ContactRecord:
    """One residue contact observed in one structure"""
    locus: Locus
    residue_id: Position
    threshold: float
    interacting_chains: FrozenSet[str]
    structure_id: str
    score: float = 1.0

    # Column names accepted for each field, original CSV headers first
    FIELD_NAMES: ClassVar[Dict[str, Tuple[str, ...]]] = {
        'locus': ('Locus', 'locus'),
        'residue_id': ('ResidueID', 'residue_id', 'residueId', 'Position', 'position'),
        'threshold': ('Threshold', 'threshold', 'distance_threshold'),
        'interacting_chains': ('InteractingChains', 'interacting_chains', 'interactingChains'),
        'structure_id': ('Structure', 'structure_id', 'structureId', 'structure'),
        'score': ('Score', 'score'),
    }

    @property
    def has_peptide_contact(self) -> bool:
        return PEPTIDE_CHAIN in self.interacting_chains

    @property
    def has_tcr_contact(self) -> bool:
        return bool(TCR_CHAINS & self.interacting_chains)

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> 'ContactRecord':
        """Create a record from a field-keyed row

        Args:
            row: Row mapping, e.g. a csv/pandas record

        Returns:
            ContactRecord instance

        Raises:
            MalformedRowError: If a required field is missing or unparseable
        """
        values = {name: first_present(row, keys) for name, keys in cls.FIELD_NAMES.items()}

        missing = [name for name in ('locus', 'residue_id', 'threshold', 'interacting_chains', 'structure_id')
                   if values[name] is None]
        if missing:
            raise MalformedRowError(f"Contact row missing required fields: {', '.join(missing)}",
                                    {'missing': missing})

        try:
            locus = Locus.from_value(values['locus'])
            residue_id = normalize_position(values['residue_id'])
            threshold = float(values['threshold'])
            score = 1.0 if values['score'] is None else float(values['score'])
        except (TypeError, ValueError) as e:
            raise MalformedRowError(f"Invalid contact row: {e}", {'row': dict(row)}) from e

        chains = parse_chains(values['interacting_chains'])
        if not chains:
            raise MalformedRowError("Contact row has no interacting chains", {'row': dict(row)})

        structure_id = values['structure_id']
        if isinstance(structure_id, float) and structure_id.is_integer():
            structure_id = int(structure_id)

        return cls(
            locus=locus,
            residue_id=residue_id,
            threshold=threshold,
            interacting_chains=chains,
            structure_id=str(structure_id).strip(),
            score=score,
        )


@dataclass(frozen=True)
class ContactDataset:
    """Validated contact records plus the count of rows that were rejected"""
    records: Tuple[ContactRecord, ...] = ()
    rejected: int = 0

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping[str, Any]]) -> 'ContactDataset':
        """Build records, skipping (and counting) malformed rows"""
        records: List[ContactRecord] = []
        rejected = 0
        for index, row in enumerate(rows):
            try:
                records.append(ContactRecord.from_dict(row))
            except MalformedRowError as e:
                rejected += 1
                logger.debug(f"Skipping contact row {index}: {e.message}")

        if rejected:
            logger.warning(f"Rejected {rejected} malformed contact rows, kept {len(records)}")
        return cls(records=tuple(records), rejected=rejected)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)


@dataclass(frozen=True)
class PositionInteractionStats:
    """Fraction of structures contacting peptide / TCR at one position"""
    position: Position
    peptide_structures: int
    tcr_structures: int
    total_structures: int
    peptide_fraction: float = field(default=0.0)
    tcr_fraction: float = field(default=0.0)

    @property
    def peptide_percentage(self) -> float:
        return self.peptide_fraction * 100.0

    @property
    def tcr_percentage(self) -> float:
        return self.tcr_fraction * 100.0

    def to_dict(self) -> dict:
        return {
            'position': self.position,
            'peptide_fraction': self.peptide_fraction,
            'tcr_fraction': self.tcr_fraction,
            'peptide_percentage': self.peptide_percentage,
            'tcr_percentage': self.tcr_percentage,
            'peptide_structures': self.peptide_structures,
            'tcr_structures': self.tcr_structures,
            'total_structures': self.total_structures,
        }
