# hlacontact/utils/stats.py
"""
Numeric helpers shared by the analysis stages.
"""
from collections import Counter
from typing import Iterable, Optional, Union

import numpy as np

Number = Union[int, float]


def safe_ratio(numerator: Number, denominator: Number) -> float:
    """Divide, returning 0.0 when the denominator is zero.

    Every fraction in the pipeline goes through here, so an empty input
    (no structures, no selected positions, all-zero batch) yields 0 rather
    than raising or producing NaN.
    """
    if not denominator:
        return 0.0
    return float(numerator) / float(denominator)


def shannon_entropy(symbols: Iterable[Optional[str]]) -> float:
    """Shannon entropy (natural log) of the symbol distribution

    Missing symbols (None) are ignored. An empty column has entropy 0.
    """
    counts = Counter(s for s in symbols if s is not None)
    total = sum(counts.values())
    if total == 0:
        return 0.0
    frequencies = np.array(list(counts.values()), dtype=float) / total
    entropy = float(-np.sum(frequencies * np.log(frequencies)))
    # single-symbol columns give -0.0
    return entropy if entropy > 0 else 0.0
