#!/usr/bin/env python3
"""
HLA contact pipeline utilities module
"""
from .grantham import SubstitutionScoreTable, GRANTHAM, MAX_GRANTHAM_SCORE, get_grantham_score
from .stats import safe_ratio, shannon_entropy

__all__ = [
    'SubstitutionScoreTable', 'GRANTHAM', 'MAX_GRANTHAM_SCORE', 'get_grantham_score',
    'safe_ratio', 'shannon_entropy',
]
