"""
Conversion of interaction fractions into position labels.
"""

import logging
from typing import Any, Mapping, Optional

from hlacontact.models import (
    InteractionType, Position, PositionInteractionStats, PositionLabel, PositionWeighting
)

logger = logging.getLogger(__name__)


class PositionClassifier:
    """Labels positions whose contact percentage strictly exceeds a threshold

    Policies:
        Peptide         peptide% > t                -> Peptide
        TCR             tcr% > t                    -> TCR
        Peptide+TCR     both > t                    -> Peptide+TCR
        Peptide-or-TCR  both > t -> Peptide+TCR, else whichever exceeds

    Positions that fail the policy are left out of the result.
    """

    @staticmethod
    def label_for(stats: PositionInteractionStats, percentage_threshold: float,
                  interaction_type: InteractionType) -> Optional[PositionLabel]:
        """Label of one position, or None when it is not selected"""
        peptide = stats.peptide_percentage > percentage_threshold
        tcr = stats.tcr_percentage > percentage_threshold

        if interaction_type is InteractionType.PEPTIDE:
            return PositionLabel.PEPTIDE if peptide else None
        if interaction_type is InteractionType.TCR:
            return PositionLabel.TCR if tcr else None
        if interaction_type is InteractionType.PEPTIDE_AND_TCR:
            return PositionLabel.PEPTIDE_AND_TCR if peptide and tcr else None

        # Peptide-or-TCR
        if peptide and tcr:
            return PositionLabel.PEPTIDE_AND_TCR
        if peptide:
            return PositionLabel.PEPTIDE
        if tcr:
            return PositionLabel.TCR
        return None

    def classify(self, stats: Mapping[Position, PositionInteractionStats],
                 percentage_threshold: float, interaction_type: Any) -> PositionWeighting:
        """PositionWeighting for the given threshold (percent) and policy"""
        interaction_type = InteractionType.from_value(interaction_type)
        threshold = float(percentage_threshold)

        weighting: PositionWeighting = {}
        for position, position_stats in stats.items():
            label = self.label_for(position_stats, threshold, interaction_type)
            if label is not None:
                weighting[position] = label

        logger.debug(f"{len(weighting)}/{len(stats)} positions selected "
                     f"({interaction_type.value} > {threshold}%)")
        return weighting
