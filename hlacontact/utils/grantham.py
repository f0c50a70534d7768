# hlacontact/utils/grantham.py
"""
Grantham (1974) physicochemical distance between amino acids.

The table is symmetric with a zero diagonal. Pairs involving gaps, unknown
residues or anything outside the twenty standard amino acids score 0.
"""
from typing import Dict, FrozenSet, Optional, Tuple

# Upper triangle of the Grantham matrix, row order matches the header.
_GRANTHAM_ORDER = "SRLPTAVGIFYCHQNKDEMW"
_GRANTHAM_UPPER = """
S 0 110 145 74 58 99 124 56 142 155 144 112 89 68 46 121 65 80 135 177
R 0 102 103 71 112 96 125 97 97 77 180 29 43 86 26 96 54 91 101
L 0 98 92 96 32 138 5 22 36 198 99 113 153 107 172 138 15 61
P 0 38 27 68 42 95 114 110 169 77 76 91 103 108 93 87 147
T 0 58 69 59 89 103 92 149 47 42 65 78 85 65 81 128
A 0 64 60 94 113 112 195 86 91 111 106 126 107 84 148
V 0 109 29 50 55 192 84 96 133 97 152 121 21 88
G 0 135 153 147 159 98 87 80 127 94 98 127 184
I 0 21 33 198 94 109 149 102 168 134 10 61
F 0 22 205 100 116 158 102 177 140 28 40
Y 0 194 83 99 143 85 160 122 36 37
C 0 174 154 139 202 154 170 196 215
H 0 24 68 32 81 40 87 115
Q 0 46 53 61 29 101 130
N 0 94 23 42 142 174
K 0 101 56 95 110
D 0 45 160 181
E 0 126 152
M 0 67
W 0
"""


def _build_table() -> Dict[FrozenSet[str], int]:
    table: Dict[FrozenSet[str], int] = {}
    for line in _GRANTHAM_UPPER.strip().splitlines():
        aa, *values = line.split()
        start = _GRANTHAM_ORDER.index(aa)
        for offset, value in enumerate(values):
            other = _GRANTHAM_ORDER[start + offset]
            if other != aa:
                table[frozenset((aa, other))] = int(value)
    return table


class SubstitutionScoreTable:
    """Symmetric amino-acid substitution cost lookup"""

    def __init__(self, scores: Optional[Dict[FrozenSet[str], int]] = None):
        self._scores = dict(scores) if scores is not None else _build_table()

    @property
    def amino_acids(self) -> Tuple[str, ...]:
        """Residues the table knows about"""
        return tuple(sorted({aa for pair in self._scores for aa in pair}))

    @property
    def max_score(self) -> int:
        """Largest single-substitution cost in the table"""
        return max(self._scores.values(), default=0)

    def score(self, residue1: Optional[str], residue2: Optional[str]) -> int:
        """Cost of substituting residue1 by residue2 (order does not matter)

        Args:
            residue1: One-letter amino acid code
            residue2: One-letter amino acid code

        Returns:
            Grantham distance, 0 for identical residues or unknown pairs
        """
        if not residue1 or not residue2:
            return 0
        residue1 = residue1.upper()
        residue2 = residue2.upper()
        if residue1 == residue2:
            return 0
        return self._scores.get(frozenset((residue1, residue2)), 0)

    def __len__(self) -> int:
        return len(self._scores)


GRANTHAM = SubstitutionScoreTable()

# Fixed divisor for classical divergence
MAX_GRANTHAM_SCORE = GRANTHAM.max_score


def get_grantham_score(residue1: Optional[str], residue2: Optional[str]) -> int:
    """Module-level shortcut for GRANTHAM.score"""
    return GRANTHAM.score(residue1, residue2)
