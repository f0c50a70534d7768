"""
HLA contact analysis stages and the service that chains them.
"""

from .contact_filter import ContactFilter
from .aggregator import PositionInteractionAggregator, count_structures
from .classifier import PositionClassifier
from .comparator import AlleleSequenceComparator, DEFAULT_SCAN_LENGTH
from .divergence import DivergenceScorer
from .entropy_filter import EntropyPolymorphismFilter
from .batch_report import BatchReport, BatchReportGenerator, PairResult, REPORT_HEADER
from .service import HLAAnalysisService, create_service

__all__ = [
    'ContactFilter',
    'PositionInteractionAggregator',
    'count_structures',
    'PositionClassifier',
    'AlleleSequenceComparator',
    'DEFAULT_SCAN_LENGTH',
    'DivergenceScorer',
    'EntropyPolymorphismFilter',
    'BatchReport',
    'BatchReportGenerator',
    'PairResult',
    'REPORT_HEADER',
    'HLAAnalysisService',
    'create_service',
]
