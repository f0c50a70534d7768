"""
Restriction of selected positions to polymorphic sites.
"""

import logging
from typing import Dict, Mapping, Optional, TypeVar

from hlacontact.models import Position

logger = logging.getLogger(__name__)

V = TypeVar('V')


class EntropyPolymorphismFilter:
    """Keeps positions whose population entropy is defined and >= threshold

    Works on a PositionWeighting or any other position-keyed map. Positions
    missing from the entropy slice are dropped. With restrict=False the map
    is returned unchanged (as a copy).
    """

    def filter(self, positions: Mapping[Position, V],
               entropy: Optional[Mapping[Position, float]],
               restrict: bool, threshold: float) -> Dict[Position, V]:
        if not restrict:
            return dict(positions)

        entropy = entropy or {}
        kept = {
            position: value for position, value in positions.items()
            if entropy.get(position) is not None and entropy[position] >= threshold
        }
        logger.debug(f"Entropy filter (>= {threshold}) kept {len(kept)}/{len(positions)} positions")
        return kept
