#!/usr/bin/env python3
"""
Tests for the record types in hlacontact.models

Covers:
- Position and locus / interaction type parsing
- ContactRecord construction from CSV-style rows
- SequenceRecord row shapes and SequenceTable lookup
- EntropyTable construction
- AnalysisParameters validation
"""

import math

import pytest

from hlacontact.exceptions import AlleleNotFoundError, DataUnavailableError, MalformedRowError, ValidationError
from hlacontact.models import (
    AlleleComparison, AnalysisParameters, ContactDataset, ContactRecord, EntropyTable,
    HLADatasets, InteractionType, Locus, MismatchRecord, PositionInteractionStats,
    SequenceRecord, SequenceTable, is_missing, normalize_position, parse_chains,
    position_sort_key
)


class TestFieldCoercion:
    """Test position normalization and missing-value detection"""

    def test_integral_positions(self):
        assert normalize_position(45) == 45
        assert normalize_position(45.0) == 45
        assert normalize_position("45") == 45
        assert normalize_position(" 45 ") == 45
        assert normalize_position("45.0") == 45

    def test_insertion_codes_stay_strings(self):
        assert normalize_position("45A") == "45A"

    def test_invalid_positions(self):
        with pytest.raises(ValueError):
            normalize_position("")
        with pytest.raises(ValueError):
            normalize_position(True)
        with pytest.raises(ValueError):
            normalize_position(4.5)

    def test_is_missing(self):
        assert is_missing(None)
        assert is_missing("  ")
        assert is_missing(float('nan'))
        assert not is_missing(0)
        assert not is_missing("A")

    def test_sort_key_orders_numbers_first(self):
        positions = ["45A", 100, 9, "10B"]
        assert sorted(positions, key=position_sort_key) == [9, 100, "10B", "45A"]


class TestEnums:
    """Test locus and interaction type parsing"""

    def test_locus_from_value(self):
        assert Locus.from_value("a") is Locus.A
        assert Locus.from_value("HLA-B") is Locus.B
        assert Locus.from_value(Locus.A) is Locus.A
        with pytest.raises(ValueError):
            Locus.from_value("C")

    def test_locus_from_allele(self):
        assert Locus.from_allele("A*02:01") is Locus.A
        assert Locus.from_allele("HLA-B*07:02") is Locus.B
        with pytest.raises(ValueError):
            Locus.from_allele("C*07:01")

    def test_interaction_type_aliases(self):
        assert InteractionType.from_value("Peptide") is InteractionType.PEPTIDE
        assert InteractionType.from_value("tcr") is InteractionType.TCR
        assert InteractionType.from_value("Peptide + TCR") is InteractionType.PEPTIDE_AND_TCR
        assert InteractionType.from_value("Peptide or TCR") is InteractionType.PEPTIDE_OR_TCR
        assert InteractionType.from_value("Peptide-or-TCR") is InteractionType.PEPTIDE_OR_TCR
        with pytest.raises(ValueError):
            InteractionType.from_value("Antibody")

    def test_parse_chains(self):
        assert parse_chains("Peptide,TCRA") == frozenset({"Peptide", "TCRA"})
        assert parse_chains("['Peptide', 'TCRB']") == frozenset({"Peptide", "TCRB"})
        assert parse_chains(["TCRA"]) == frozenset({"TCRA"})
        assert parse_chains(None) == frozenset()


class TestContactRecord:
    """Test ContactRecord.from_dict"""

    def test_from_csv_row(self):
        record = ContactRecord.from_dict({
            'Locus': 'A', 'ResidueID': '45', 'Threshold': '3',
            'InteractingChains': 'Peptide,TCRA', 'Structure': '1abc', 'Score': '0.8'
        })
        assert record.locus is Locus.A
        assert record.residue_id == 45
        assert record.threshold == 3.0
        assert record.structure_id == "1abc"
        assert record.score == pytest.approx(0.8)
        assert record.has_peptide_contact
        assert record.has_tcr_contact

    def test_score_defaults_to_one(self):
        record = ContactRecord.from_dict({
            'locus': 'B', 'residue_id': 62, 'threshold': 4,
            'interacting_chains': ['TCRB'], 'structure_id': 'S1'
        })
        assert record.score == 1.0
        assert record.has_tcr_contact
        assert not record.has_peptide_contact

    def test_numeric_structure_id(self):
        record = ContactRecord.from_dict({
            'Locus': 'A', 'ResidueID': 45, 'Threshold': 3,
            'InteractingChains': 'Peptide', 'Structure': 1234.0
        })
        assert record.structure_id == "1234"

    def test_missing_fields(self):
        with pytest.raises(MalformedRowError) as exc_info:
            ContactRecord.from_dict({'Locus': 'A', 'ResidueID': 45})
        assert 'threshold' in exc_info.value.details['missing']

    def test_invalid_threshold(self):
        with pytest.raises(MalformedRowError):
            ContactRecord.from_dict({
                'Locus': 'A', 'ResidueID': 45, 'Threshold': 'near',
                'InteractingChains': 'Peptide', 'Structure': 'S1'
            })

    def test_dataset_counts_rejected_rows(self, contact_rows):
        rows = contact_rows + [{'Locus': 'A'}, {'Locus': 'Z', 'ResidueID': 1, 'Threshold': 3,
                                                'InteractingChains': 'Peptide', 'Structure': 'S1'}]
        dataset = ContactDataset.from_rows(rows)
        assert len(dataset) == len(contact_rows)
        assert dataset.rejected == 2


class TestPositionInteractionStats:
    """Test percentage views of the stats record"""

    def test_percentages(self):
        stats = PositionInteractionStats(position=45, peptide_structures=3, tcr_structures=1,
                                         total_structures=10, peptide_fraction=0.3, tcr_fraction=0.1)
        assert stats.peptide_percentage == pytest.approx(30.0)
        assert stats.tcr_percentage == pytest.approx(10.0)
        assert stats.to_dict()['total_structures'] == 10


class TestSequenceRecords:
    """Test sequence row shapes and table lookup"""

    def test_numeric_columns(self):
        record = SequenceRecord.from_row({'AA': 'A*02:01', '1': 'G', '2': 's', '3': None, 'note': 'x'})
        assert record.allele_id == 'A*02:01'
        assert record.residues == {1: 'G', 2: 'S', 3: None}
        assert record.sequence == "GS-"

    def test_columns_beyond_max_position_ignored(self):
        record = SequenceRecord.from_row({'AA': 'A*02:01', '1': 'G', '400': 'W'})
        assert record.positions == [1]

    def test_sequence_string(self):
        record = SequenceRecord.from_row({'Allele': 'B*07:02', 'Sequence': 'gsh sm'})
        assert record.residue_at(1) == 'G'
        assert record.residue_at(5) == 'M'
        assert record.residue_at(6) is None

    def test_row_without_allele(self):
        with pytest.raises(MalformedRowError):
            SequenceRecord.from_row({'1': 'G'})

    def test_row_without_residues(self):
        with pytest.raises(MalformedRowError):
            SequenceRecord.from_row({'AA': 'A*02:01'})

    def test_case_insensitive_lookup(self, table_a):
        assert table_a.get('a*02:01').allele_id == 'A*02:01'
        assert 'A*03:01' in table_a
        assert 'A*99:99' not in table_a
        assert table_a.get(None) is None

    def test_require_raises(self, table_a):
        with pytest.raises(AlleleNotFoundError) as exc_info:
            table_a.require('A*99:99')
        assert 'A*02:01' in exc_info.value.details['available']

    def test_alleles_in_load_order(self, table_a):
        assert table_a.alleles() == ['A*02:01', 'A*03:01', 'A*01:01']
        assert len(table_a) == 3

    def test_duplicate_keeps_last(self):
        table = SequenceTable([
            SequenceRecord('A*02:01', {1: 'G'}),
            SequenceRecord('A*02:01', {1: 'W'}),
        ])
        assert len(table) == 1
        assert table.get('A*02:01').residue_at(1) == 'W'

    def test_from_rows_counts_rejected(self):
        table = SequenceTable.from_rows([{'AA': 'A*02:01', '1': 'G'}, {'AA': 'A*03:01'}])
        assert len(table) == 1
        assert table.rejected == 1


class TestEntropyTable:
    """Test EntropyTable construction"""

    def test_from_rows(self):
        table = EntropyTable.from_rows([
            {'Locus': 'A', 'Position': 45, 'Entropy': 0.5},
            {'Locus': 'B', 'Position': '62', 'Entropy': '0.1'},
            {'Locus': 'A', 'Position': 46, 'Entropy': None},
            {'Locus': 'C', 'Position': 1, 'Entropy': 0.9},
        ])
        assert table.for_locus('A') == {45: 0.5}
        assert table.for_locus(Locus.B) == {62: 0.1}
        assert len(table) == 2

    def test_for_locus_returns_copy(self):
        table = EntropyTable({'A': {1: 0.3}})
        table.for_locus('A')[2] = 1.0
        assert table.for_locus('A') == {1: 0.3}

    def test_from_sequence_tables(self, sequence_tables):
        table = EntropyTable.from_sequence_tables(sequence_tables)
        entropy_a = table.for_locus('A')
        assert entropy_a[1] == 0.0
        # S, R, S
        expected = -(2 / 3 * math.log(2 / 3) + 1 / 3 * math.log(1 / 3))
        assert entropy_a[2] == pytest.approx(expected)
        assert table.for_locus('B')[9] == pytest.approx(math.log(2))

    def test_to_rows_sorted(self):
        table = EntropyTable({'A': {9: 0.1, 2: 0.2}})
        rows = table.to_rows()
        assert [r['Position'] for r in rows] == [2, 9]
        assert rows[0]['Locus'] == 'A'


class TestAnalysisParameters:
    """Test parameter conversion and validation"""

    def test_defaults(self):
        params = AnalysisParameters()
        assert params.locus is Locus.A
        assert params.distance_threshold == 3
        assert params.percentage_threshold == 20
        assert params.interaction_type is InteractionType.PEPTIDE
        assert not params.has_allele_pair

    def test_string_values_converted(self):
        params = AnalysisParameters(locus='B', interaction_type='TCR')
        assert params.locus is Locus.B
        assert params.interaction_type is InteractionType.TCR

    def test_invalid_locus(self):
        with pytest.raises(ValidationError):
            AnalysisParameters(locus='C')

    @pytest.mark.parametrize("field,value", [
        ('percentage_threshold', 120),
        ('percentage_threshold', -1),
        ('distance_threshold', -3),
        ('min_score', 1.5),
        ('entropy_threshold', 'high'),
    ])
    def test_out_of_range(self, field, value):
        with pytest.raises(ValidationError):
            AnalysisParameters(**{field: value})

    def test_from_dict_aliases(self):
        params = AnalysisParameters.from_dict({
            'locus': 'B', 'distanceThreshold': 4, 'percentageThreshold': 50,
            'interactionType': 'Peptide+TCR', 'showPolymorphicOnly': True, 'unknown': 1
        })
        assert params.locus is Locus.B
        assert params.distance_threshold == 4
        assert params.percentage_threshold == 50
        assert params.interaction_type is InteractionType.PEPTIDE_AND_TCR
        assert params.show_polymorphic_only

    def test_with_overrides_ignores_none(self):
        params = AnalysisParameters(percentage_threshold=30)
        updated = params.with_overrides(locus='B', percentage_threshold=None)
        assert updated.locus is Locus.B
        assert updated.percentage_threshold == 30
        assert params.locus is Locus.A

    def test_with_overrides_validates(self):
        with pytest.raises(ValidationError):
            AnalysisParameters().with_overrides(interaction_type='Antibody')

    def test_to_dict(self):
        data = AnalysisParameters(allele1='A*02:01', allele2='A*03:01').to_dict()
        assert data['locus'] == 'A'
        assert data['interaction_type'] == 'Peptide'
        assert data['allele2'] == 'A*03:01'


class TestComparisonModels:
    """Test comparison and dataset records"""

    def test_comparison_summary(self):
        comparison = AlleleComparison(
            allele1='A*02:01', allele2='A*03:01', locus=Locus.A,
            mismatches=(MismatchRecord(2, 'S', 'R', 110), MismatchRecord(9, 'Y', 'F', 22)),
            compared_positions=10,
        )
        assert comparison.mismatch_count == 2
        assert comparison.mismatch_percentage == pytest.approx(20.0)
        assert comparison.total_substitution_score == 132
        assert comparison.to_dict()['mismatches'][0]['residue2'] == 'R'

    def test_swapped_mismatch(self):
        swapped = MismatchRecord(2, 'S', 'R', 110).swapped()
        assert (swapped.residue1, swapped.residue2, swapped.substitution_score) == ('R', 'S', 110)

    def test_sequences_for_missing_locus(self, contact_dataset, table_a):
        datasets = HLADatasets(contacts=contact_dataset, sequences={Locus.A: table_a})
        assert datasets.sequences_for('A') is table_a
        with pytest.raises(DataUnavailableError):
            datasets.sequences_for('B')
