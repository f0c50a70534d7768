#!/usr/bin/env python3
"""
High-level service interface for the HLA contact analysis.

Runs ContactFilter -> PositionInteractionAggregator -> PositionClassifier to
obtain the position weighting, optionally compares an allele pair and scores
its divergence, and narrows the weighting by entropy for display. Batch
reports reuse the same comparator and scorer.
"""

import logging
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from hlacontact.config import ConfigManager
from hlacontact.exceptions import DataUnavailableError
from hlacontact.models import (
    AlleleComparison, AnalysisParameters, AnalysisResult, EntropyTable, HLADatasets,
    Locus, Position, PositionInteractionStats, PositionWeighting
)
from hlacontact.utils.grantham import MAX_GRANTHAM_SCORE

from .aggregator import PositionInteractionAggregator, count_structures
from .batch_report import BatchReport, BatchReportGenerator
from .classifier import PositionClassifier
from .comparator import AlleleSequenceComparator, DEFAULT_SCAN_LENGTH
from .contact_filter import ContactFilter
from .divergence import DivergenceScorer
from .entropy_filter import EntropyPolymorphismFilter


class HLAAnalysisService:
    """
    High-level service for position weighting and allele divergence.

    Every call works on the tables it is given and returns fresh values, so
    one service instance can be reused with different parameters.
    """

    def __init__(self, config_manager=None, service_config: Optional[Dict[str, Any]] = None):
        """
        Initialize the analysis service.

        Args:
            config_manager: Optional ConfigManager supplying the 'divergence' section
            service_config: Optional overrides (scan_length, normalization_constant)
        """
        self.logger = logging.getLogger(__name__)
        self.config_manager = config_manager

        settings: Dict[str, Any] = {}
        if config_manager is not None:
            settings.update(config_manager.get_section('divergence'))
        settings.update(service_config or {})

        self.scan_length = int(settings.get('scan_length', DEFAULT_SCAN_LENGTH))
        self.normalization_constant = float(settings.get('normalization_constant', MAX_GRANTHAM_SCORE))

        self.aggregator = PositionInteractionAggregator()
        self.classifier = PositionClassifier()
        self.comparator = AlleleSequenceComparator(scan_length=self.scan_length)
        self.scorer = DivergenceScorer(self.normalization_constant)
        self.entropy_filter = EntropyPolymorphismFilter()
        self.batch_generator = BatchReportGenerator(self.comparator, self.scorer)

        self.logger.debug(f"HLAAnalysisService initialized (scan_length={self.scan_length}, "
                          f"normalization_constant={self.normalization_constant})")

    def default_parameters(self) -> AnalysisParameters:
        """Parameters from configuration, or the built-in defaults"""
        if self.config_manager is None:
            return AnalysisParameters()
        return AnalysisParameters.from_config(self.config_manager)

    def compute_weighting(self, datasets: HLADatasets, parameters: AnalysisParameters
                          ) -> Tuple[Dict[Position, PositionInteractionStats], PositionWeighting, int, int]:
        """Stats, weighting, contacts considered and structure count for *parameters*"""
        contact_filter = ContactFilter(integer_thresholds=parameters.integer_thresholds,
                                       min_score=parameters.min_score)
        selected = contact_filter.filter(datasets.contacts.records, parameters.locus,
                                         parameters.distance_threshold)
        stats = self.aggregator.aggregate(selected)
        weighting = self.classifier.classify(stats, parameters.percentage_threshold,
                                             parameters.interaction_type)
        return stats, weighting, len(selected), count_structures(selected)

    def compare_alleles(self, allele1: str, allele2: str, datasets: HLADatasets,
                        locus: Optional[Any] = None) -> Optional[AlleleComparison]:
        """Comparison of two alleles; None when unavailable"""
        locus = Locus.from_value(locus) if locus is not None else Locus.from_allele(allele1)
        return self.comparator.compare(allele1, allele2, locus, datasets.sequences)

    def filter_polymorphic(self, weighting: PositionWeighting, parameters: AnalysisParameters,
                           entropy: Optional[EntropyTable]) -> PositionWeighting:
        """Entropy-restricted view of *weighting* when show_polymorphic_only is set"""
        if not parameters.show_polymorphic_only:
            return dict(weighting)
        if entropy is None:
            raise DataUnavailableError("Entropy table required to restrict to polymorphic positions")
        return self.entropy_filter.filter(weighting, entropy.for_locus(parameters.locus),
                                          True, parameters.entropy_threshold)

    def analyze(self, datasets: HLADatasets, parameters: Optional[AnalysisParameters] = None,
                entropy: Optional[EntropyTable] = None) -> AnalysisResult:
        """
        Run the full analysis for one parameter set.

        Args:
            datasets: Loaded contact and sequence tables
            parameters: Analysis parameters (configuration defaults if omitted)
            entropy: Entropy table, needed only with show_polymorphic_only

        Returns:
            AnalysisResult; comparison and divergence are None when no allele
            pair was requested or an allele was not found
        """
        parameters = parameters or self.default_parameters()
        self.logger.info(f"Analyzing locus {parameters.locus.value} at {parameters.distance_threshold}Å, "
                         f"{parameters.interaction_type.value} > {parameters.percentage_threshold}%")

        stats, weighting, considered, structures = self.compute_weighting(datasets, parameters)
        result = AnalysisResult(
            parameters=parameters,
            stats=stats,
            weighting=weighting,
            display_weighting=self.filter_polymorphic(weighting, parameters, entropy),
            total_structures=structures,
            contacts_considered=considered,
        )

        if parameters.has_allele_pair:
            comparison = self.compare_alleles(parameters.allele1, parameters.allele2, datasets,
                                              locus=parameters.locus)
            if comparison is not None:
                result.comparison = comparison
                result.divergence = self.scorer.score(comparison, weighting)

        self.logger.info(f"Selected {len(weighting)} positions "
                         f"({len(result.display_weighting)} displayed) from {structures} structures")
        return result

    def run_batch(self, pairs: Iterable[Sequence[str]], datasets: HLADatasets,
                  parameters: Optional[AnalysisParameters] = None,
                  weighting: Optional[PositionWeighting] = None) -> BatchReport:
        """Batch divergence report; the weighting is computed from *parameters* if not given"""
        parameters = parameters or self.default_parameters()
        if weighting is None:
            _, weighting, _, _ = self.compute_weighting(datasets, parameters)
        return self.batch_generator.generate(pairs, datasets.sequences, weighting, parameters)


def create_service(config_path: Optional[str] = None,
                   service_config: Optional[Dict[str, Any]] = None) -> HLAAnalysisService:
    """Create a service from a configuration file"""
    return HLAAnalysisService(ConfigManager(config_path), service_config)
