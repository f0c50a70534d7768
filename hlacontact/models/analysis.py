#!/usr/bin/env python3
"""
Analysis parameters and result models.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from hlacontact.exceptions import ValidationError
from hlacontact.models.base import Position, position_sort_key
from hlacontact.models.contact import InteractionType, Locus, PositionInteractionStats, PositionLabel
from hlacontact.utils.stats import safe_ratio

# position -> label; a position is present only if it passed classification
PositionWeighting = Dict[Position, PositionLabel]


def sorted_positions(weighting: Dict[Position, Any]) -> List[Position]:
    """Keys of a position map in numeric order"""
    return sorted(weighting, key=position_sort_key)


@dataclass
class AnalysisParameters:
    """
    Per-call configuration surface of the analysis.

    String values for locus and interaction_type are converted to their enums
    on construction, and the whole object is validated.
    """
    locus: Locus = Locus.A
    distance_threshold: float = 3
    percentage_threshold: float = 20
    interaction_type: InteractionType = InteractionType.PEPTIDE
    allele1: Optional[str] = None
    allele2: Optional[str] = None
    show_polymorphic_only: bool = False
    entropy_threshold: float = 0.2
    min_score: float = 0.0
    integer_thresholds: bool = False

    def __post_init__(self):
        try:
            self.locus = Locus.from_value(self.locus)
            self.interaction_type = InteractionType.from_value(self.interaction_type)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        self.validate()

    def validate(self) -> None:
        """Check numeric ranges

        Raises:
            ValidationError: If any parameter is out of range
        """
        errors = []

        for name in ('distance_threshold', 'percentage_threshold', 'entropy_threshold', 'min_score'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                errors.append(f"{name} must be a number")

        if not errors:
            if not 0.0 <= self.percentage_threshold <= 100.0:
                errors.append("percentage_threshold must be between 0 and 100")
            if self.distance_threshold < 0:
                errors.append("distance_threshold must be non-negative")
            if self.entropy_threshold < 0:
                errors.append("entropy_threshold must be non-negative")
            if not 0.0 <= self.min_score <= 1.0:
                errors.append("min_score must be between 0.0 and 1.0")

        if errors:
            raise ValidationError(f"Invalid analysis parameters: {'; '.join(errors)}",
                                  {'errors': errors})

    @property
    def has_allele_pair(self) -> bool:
        return bool(self.allele1) and bool(self.allele2)

    def with_overrides(self, **overrides) -> 'AnalysisParameters':
        """Copy with the given fields replaced (None values are ignored)"""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            'locus': self.locus.value,
            'distance_threshold': self.distance_threshold,
            'percentage_threshold': self.percentage_threshold,
            'interaction_type': self.interaction_type.value,
            'allele1': self.allele1,
            'allele2': self.allele2,
            'show_polymorphic_only': self.show_polymorphic_only,
            'entropy_threshold': self.entropy_threshold,
            'min_score': self.min_score,
            'integer_thresholds': self.integer_thresholds,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AnalysisParameters':
        """Create from a dictionary; unknown keys are ignored, camelCase accepted"""
        aliases = {
            'distanceThreshold': 'distance_threshold',
            'distance': 'distance_threshold',
            'percentageThreshold': 'percentage_threshold',
            'percentage': 'percentage_threshold',
            'interactionType': 'interaction_type',
            'showPolymorphicOnly': 'show_polymorphic_only',
            'entropyThreshold': 'entropy_threshold',
            'minScore': 'min_score',
        }
        known = set(cls.__dataclass_fields__)
        kwargs = {}
        for key, value in data.items():
            name = aliases.get(key, key)
            if name in known:
                kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def from_config(cls, config_manager) -> 'AnalysisParameters':
        """Defaults from the 'analysis' configuration section"""
        return cls.from_dict(config_manager.get_section('analysis'))


@dataclass(frozen=True)
class MismatchRecord:
    """One differing position between two alleles"""
    position: int
    residue1: Optional[str]
    residue2: Optional[str]
    substitution_score: int = 0

    def swapped(self) -> 'MismatchRecord':
        return MismatchRecord(self.position, self.residue2, self.residue1, self.substitution_score)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'position': self.position,
            'residue1': self.residue1,
            'residue2': self.residue2,
            'substitution_score': self.substitution_score,
        }


@dataclass(frozen=True)
class AlleleComparison:
    """Column-by-column comparison of two alleles"""
    allele1: str
    allele2: str
    locus: Locus
    mismatches: Tuple[MismatchRecord, ...] = ()
    compared_positions: int = 0

    @property
    def mismatch_count(self) -> int:
        return len(self.mismatches)

    @property
    def mismatch_percentage(self) -> float:
        return safe_ratio(self.mismatch_count, self.compared_positions) * 100.0

    @property
    def total_substitution_score(self) -> int:
        return sum(m.substitution_score for m in self.mismatches)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'allele1': self.allele1,
            'allele2': self.allele2,
            'locus': self.locus.value,
            'compared_positions': self.compared_positions,
            'mismatch_count': self.mismatch_count,
            'mismatch_percentage': self.mismatch_percentage,
            'mismatches': [m.to_dict() for m in self.mismatches],
        }


@dataclass(frozen=True)
class DivergenceScore:
    """Classical and position-specific divergence for one allele pair"""
    classical: float = 0.0
    specific: float = 0.0
    normalized_classical: Optional[float] = None
    normalized_specific: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'classical': self.classical,
            'specific': self.specific,
            'normalized_classical': self.normalized_classical,
            'normalized_specific': self.normalized_specific,
        }


@dataclass
class AnalysisResult:
    """Everything one analysis request produces"""
    parameters: AnalysisParameters
    stats: Dict[Position, PositionInteractionStats] = field(default_factory=dict)
    weighting: PositionWeighting = field(default_factory=dict)
    display_weighting: PositionWeighting = field(default_factory=dict)
    comparison: Optional[AlleleComparison] = None
    divergence: Optional[DivergenceScore] = None
    total_structures: int = 0
    contacts_considered: int = 0

    @property
    def comparison_available(self) -> bool:
        return self.comparison is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'parameters': self.parameters.to_dict(),
            'total_structures': self.total_structures,
            'contacts_considered': self.contacts_considered,
            'stats': [self.stats[p].to_dict() for p in sorted_positions(self.stats)],
            'weighting': {str(p): self.weighting[p].value for p in sorted_positions(self.weighting)},
            'display_weighting': {str(p): self.display_weighting[p].value
                                  for p in sorted_positions(self.display_weighting)},
            'comparison': self.comparison.to_dict() if self.comparison else None,
            'divergence': self.divergence.to_dict() if self.divergence else None,
        }
