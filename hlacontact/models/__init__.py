"""
Typed records for the HLA contact pipeline.
"""

from hlacontact.models.base import Position, is_missing, normalize_position, position_sort_key
from hlacontact.models.contact import (
    Locus, InteractionType, PositionLabel, ContactRecord, ContactDataset,
    PositionInteractionStats, parse_chains, PEPTIDE_CHAIN, TCR_CHAINS
)
from hlacontact.models.sequence import SequenceRecord, SequenceTable, MAX_POSITION
from hlacontact.models.entropy import EntropyTable
from hlacontact.models.analysis import (
    AnalysisParameters, AnalysisResult, AlleleComparison, DivergenceScore,
    MismatchRecord, PositionWeighting, sorted_positions
)
from hlacontact.models.dataset import HLADatasets

__all__ = [
    'Position', 'is_missing', 'normalize_position', 'position_sort_key',
    'Locus', 'InteractionType', 'PositionLabel', 'ContactRecord', 'ContactDataset',
    'PositionInteractionStats', 'parse_chains', 'PEPTIDE_CHAIN', 'TCR_CHAINS',
    'SequenceRecord', 'SequenceTable', 'MAX_POSITION',
    'EntropyTable',
    'AnalysisParameters', 'AnalysisResult', 'AlleleComparison', 'DivergenceScore',
    'MismatchRecord', 'PositionWeighting', 'sorted_positions',
    'HLADatasets',
]
