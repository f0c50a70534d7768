"""
Bundle of the tables one analysis request reads.
"""

from dataclasses import dataclass, field
from typing import Dict

from hlacontact.exceptions import DataUnavailableError
from hlacontact.models.contact import ContactDataset, Locus
from hlacontact.models.sequence import SequenceTable


@dataclass(frozen=True)
class HLADatasets:
    """Contact records plus one sequence table per locus"""
    contacts: ContactDataset
    sequences: Dict[Locus, SequenceTable] = field(default_factory=dict)

    def sequences_for(self, locus) -> SequenceTable:
        """Sequence table for *locus*

        Raises:
            DataUnavailableError: If no table was loaded for the locus
        """
        locus = Locus.from_value(locus)
        table = self.sequences.get(locus)
        if table is None:
            raise DataUnavailableError(f"No sequence table loaded for locus {locus.value}",
                                       {'locus': locus.value})
        return table
