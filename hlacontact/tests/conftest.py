#!/usr/bin/env python3
"""
Shared fixtures for the hlacontact test suite.

The contact fixture describes ten locus-A structures at 3 Å:

* position 9: peptide contact in 3 structures (30%)
* position 2: TCRA contact in 3 structures (30%), peptide in 1 (10%)
* position 5: beta-2-microglobulin contact in every structure (0% / 0%)

plus one record at 4 Å and one at locus B that the filter must drop.

A*02:01 and A*03:01 differ at position 2 (S -> R, Grantham 110) and
position 9 (Y -> F, Grantham 22).
"""

import pytest
import yaml
from pathlib import Path

from hlacontact.config import ConfigManager
from hlacontact.models import (
    ContactDataset, HLADatasets, Locus, SequenceRecord, SequenceTable
)

A0201 = "GSHSMRYFYT"
A0301 = "GRHSMRYFFT"
A0101 = "GSHSMRYFFT"
B0702 = "GSHSMRYFYT"
B0801 = "GSHSMRYFDT"


def _contact(position, chains, structure, threshold=3, locus="A", score=None):
    row = {
        'Locus': locus,
        'ResidueID': position,
        'Threshold': threshold,
        'InteractingChains': chains,
        'Structure': structure,
    }
    if score is not None:
        row['Score'] = score
    return row


def build_contact_rows():
    structures = [f"S{i}" for i in range(1, 11)]
    rows = []
    for structure in structures:
        rows.append(_contact(5, "B2M", structure))
    for structure in structures[:3]:
        rows.append(_contact(9, "Peptide", structure))
        rows.append(_contact(2, "TCRA", structure))
    rows.append(_contact(2, "Peptide", structures[3]))
    rows.append(_contact(9, "Peptide", "S99", threshold=4))
    rows.append(_contact(9, "Peptide", "S98", locus="B"))
    return rows


def sequence_rows(sequences):
    """Column-per-position rows ('AA', '1', '2', ...)"""
    rows = []
    for allele, sequence in sequences.items():
        row = {'AA': allele}
        for index, residue in enumerate(sequence, start=1):
            row[str(index)] = residue
        rows.append(row)
    return rows


@pytest.fixture
def contact_rows():
    return build_contact_rows()


@pytest.fixture
def contact_dataset(contact_rows):
    return ContactDataset.from_rows(contact_rows)


@pytest.fixture
def table_a():
    return SequenceTable.from_rows(sequence_rows({
        'A*02:01': A0201,
        'A*03:01': A0301,
        'A*01:01': A0101,
    }))


@pytest.fixture
def table_b():
    return SequenceTable([
        SequenceRecord.from_row({'Allele': 'B*07:02', 'Sequence': B0702}),
        SequenceRecord.from_row({'Allele': 'B*08:01', 'Sequence': B0801}),
    ])


@pytest.fixture
def sequence_tables(table_a, table_b):
    return {Locus.A: table_a, Locus.B: table_b}


@pytest.fixture
def datasets(contact_dataset, sequence_tables):
    return HLADatasets(contacts=contact_dataset, sequences=sequence_tables)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove HLACONTACT_* variables so configuration tests see only their own"""
    import os
    for key in list(os.environ):
        if key.startswith(ConfigManager.ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture
def data_dir(tmp_path):
    """Contact, sequence and entropy files in their on-disk formats"""
    data = tmp_path / "data"
    data.mkdir()

    header = "Locus;ResidueID;Threshold;InteractingChains;Structure;Score"
    lines = [header]
    for row in build_contact_rows():
        lines.append(";".join(str(row[k]) for k in ('Locus', 'ResidueID', 'Threshold',
                                                    'InteractingChains', 'Structure')) + ";1")
    (data / "mhc_contacts.csv").write_text("\n".join(lines) + "\n")

    def write_sequences(path: Path, sequences):
        width = max(len(s) for s in sequences.values())
        out = ["AA," + ",".join(str(i) for i in range(1, width + 1))]
        for allele, sequence in sequences.items():
            out.append(allele + "," + ",".join(sequence))
        path.write_text("\n".join(out) + "\n")

    write_sequences(data / "A.csv", {'A*02:01': A0201, 'A*03:01': A0301, 'A*01:01': A0101})
    write_sequences(data / "B.csv", {'B*07:02': B0702, 'B*08:01': B0801})

    (data / "entropy.csv").write_text(
        "Locus;Position;Entropy\nA;2;0.64\nA;9;0.05\nA;5;0.0\nB;9;0.69\n"
    )
    return data


@pytest.fixture
def config_file(tmp_path, data_dir):
    """YAML configuration pointing at data_dir"""
    config = {
        'data': {
            'contacts': str(data_dir / "mhc_contacts.csv"),
            'sequences_a': str(data_dir / "A.csv"),
            'sequences_b': str(data_dir / "B.csv"),
            'entropy': str(data_dir / "entropy.csv"),
        },
        'analysis': {
            'locus': 'A',
            'distance_threshold': 3,
            'percentage_threshold': 20,
            'interaction_type': 'Peptide',
        },
    }
    path = tmp_path / "config.yml"
    path.write_text(yaml.safe_dump(config))
    return path
