#!/usr/bin/env python3
"""
Tests for allele comparison, divergence scoring and the entropy filter.
"""

import pytest

from hlacontact.models import (
    AlleleComparison, DivergenceScore, Locus, MismatchRecord, PositionLabel, SequenceRecord
)
from hlacontact.pipelines.analysis import (
    AlleleSequenceComparator, DivergenceScorer, EntropyPolymorphismFilter
)


class TestAlleleSequenceComparator:
    """Test column-by-column comparison"""

    def test_identical_alleles(self, sequence_tables):
        comparison = AlleleSequenceComparator().compare('A*02:01', 'A*02:01', 'A', sequence_tables)
        assert comparison.mismatch_count == 0
        assert comparison.compared_positions == 10
        score = DivergenceScorer().score(comparison, {9: PositionLabel.PEPTIDE})
        assert score.classical == 0.0
        assert score.specific == 0.0

    def test_mismatches_and_scores(self, sequence_tables):
        comparison = AlleleSequenceComparator().compare('A*02:01', 'A*03:01', Locus.A, sequence_tables)
        assert [(m.position, m.residue1, m.residue2, m.substitution_score)
                for m in comparison.mismatches] == [(2, 'S', 'R', 110), (9, 'Y', 'F', 22)]
        assert comparison.mismatch_percentage == pytest.approx(20.0)

    def test_symmetric(self, sequence_tables):
        comparator = AlleleSequenceComparator()
        forward = comparator.compare('A*02:01', 'A*03:01', 'A', sequence_tables)
        backward = comparator.compare('A*03:01', 'A*02:01', 'A', sequence_tables)
        assert [m.position for m in forward.mismatches] == [m.position for m in backward.mismatches]
        assert [m.swapped() for m in forward.mismatches] == list(backward.mismatches)

    def test_case_insensitive_alleles(self, sequence_tables):
        comparison = AlleleSequenceComparator().compare('a*02:01', 'a*03:01', 'A', sequence_tables)
        assert comparison.allele1 == 'A*02:01'
        assert comparison.mismatch_count == 2

    def test_missing_allele(self, sequence_tables):
        assert AlleleSequenceComparator().compare('A*02:01', 'A*99:99', 'A', sequence_tables) is None

    def test_missing_locus_table(self, table_a):
        assert AlleleSequenceComparator().compare('B*07:02', 'B*08:01', 'B', {Locus.A: table_a}) is None

    def test_scan_length_limits_positions(self):
        record1 = SequenceRecord('A*02:01', {1: 'G', 2: 'S', 3: 'H'})
        record2 = SequenceRecord('A*03:01', {1: 'G', 2: 'S', 3: 'W'})
        comparison = AlleleSequenceComparator(scan_length=2).compare_records(record1, record2, 'A')
        assert comparison.compared_positions == 2
        assert comparison.mismatch_count == 0

    def test_missing_residue_is_a_mismatch_scoring_zero(self):
        record1 = SequenceRecord('A*02:01', {1: 'G', 2: None})
        record2 = SequenceRecord('A*03:01', {1: 'G', 2: 'S'})
        comparison = AlleleSequenceComparator().compare_records(record1, record2, 'A')
        assert comparison.mismatches == (MismatchRecord(2, None, 'S', 0),)

    def test_invalid_scan_length(self):
        with pytest.raises(ValueError):
            AlleleSequenceComparator(scan_length=0)


class TestDivergenceScorer:
    """Test classical and specific divergence"""

    @pytest.fixture
    def mismatches(self):
        return [MismatchRecord(2, 'S', 'R', 110), MismatchRecord(9, 'Y', 'F', 22)]

    def test_classical_uses_fixed_constant(self, mismatches):
        assert DivergenceScorer().classical(mismatches) == pytest.approx(132 / 215)
        assert DivergenceScorer(100).classical(mismatches) == pytest.approx(1.32)

    def test_specific_divides_by_weighted_positions(self, mismatches):
        weighting = {9: PositionLabel.PEPTIDE, 45: PositionLabel.PEPTIDE}
        assert DivergenceScorer().specific(mismatches, weighting) == pytest.approx(11.0)

    def test_empty_weighting(self, mismatches):
        score = DivergenceScorer().score(mismatches, {})
        assert score.specific == 0.0
        assert score.classical > 0

    def test_no_mismatches(self):
        score = DivergenceScorer().score([], {9: PositionLabel.PEPTIDE})
        assert score == DivergenceScore(0.0, 0.0)

    def test_accepts_comparison(self, mismatches):
        comparison = AlleleComparison('A*02:01', 'A*03:01', Locus.A, tuple(mismatches), 10)
        score = DivergenceScorer().score(comparison, {2: PositionLabel.TCR})
        assert score.specific == pytest.approx(110.0)
        assert score.normalized_classical is None

    def test_invalid_constant(self):
        with pytest.raises(ValueError):
            DivergenceScorer(0)

    def test_normalize_batch(self):
        scores = [DivergenceScore(2.0, 10.0), None, DivergenceScore(1.0, 0.0)]
        normalized = DivergenceScorer.normalize_batch(scores)
        assert normalized[1] is None
        assert normalized[0].normalized_classical == pytest.approx(1.0)
        assert normalized[0].normalized_specific == pytest.approx(1.0)
        assert normalized[2].normalized_classical == pytest.approx(0.5)
        assert normalized[2].normalized_specific == 0.0

    def test_normalize_all_zero(self):
        normalized = DivergenceScorer.normalize_batch([DivergenceScore(0.0, 0.0)])
        assert normalized[0].normalized_classical == 0.0
        assert normalized[0].normalized_specific == 0.0

    def test_normalize_empty(self):
        assert DivergenceScorer.normalize_batch([]) == []


class TestEntropyPolymorphismFilter:
    """Test restriction to polymorphic positions"""

    @pytest.fixture
    def weighting(self):
        return {2: PositionLabel.TCR, 5: PositionLabel.PEPTIDE, 9: PositionLabel.PEPTIDE}

    def test_no_restriction_returns_copy(self, weighting):
        result = EntropyPolymorphismFilter().filter(weighting, {}, False, 0.2)
        assert result == weighting
        assert result is not weighting

    def test_threshold_inclusive(self, weighting):
        entropy = {2: 0.2, 5: 0.1, 9: 0.5}
        result = EntropyPolymorphismFilter().filter(weighting, entropy, True, 0.2)
        assert result == {2: PositionLabel.TCR, 9: PositionLabel.PEPTIDE}

    def test_positions_without_entropy_dropped(self, weighting):
        result = EntropyPolymorphismFilter().filter(weighting, {2: 0.9}, True, 0.2)
        assert result == {2: PositionLabel.TCR}

    def test_idempotent(self, weighting):
        entropy = {2: 0.3, 5: 0.0, 9: 0.7}
        entropy_filter = EntropyPolymorphismFilter()
        once = entropy_filter.filter(weighting, entropy, True, 0.2)
        assert entropy_filter.filter(once, entropy, True, 0.2) == once

    def test_missing_entropy_table(self, weighting):
        assert EntropyPolymorphismFilter().filter(weighting, None, True, 0.2) == {}
