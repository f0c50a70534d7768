#!/usr/bin/env python3
"""
Dataset loaders: contact records, per-locus sequence tables and entropy.

Sources are local paths or http(s) URLs. Tables are read with pandas so that
numeric-looking cells arrive as numbers; empty cells become None.
"""
import io
import re
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import pandas as pd
import requests

from hlacontact.exceptions import DataUnavailableError
from hlacontact.models import ContactDataset, EntropyTable, HLADatasets, Locus, SequenceTable, MAX_POSITION

logger = logging.getLogger(__name__)

Rows = List[Dict[str, Any]]


def _is_url(source: str) -> bool:
    return str(source).lower().startswith(("http://", "https://"))


def read_table(source: Union[str, Path], delimiter: str = ",", timeout: float = 30) -> Rows:
    """Read a delimited table into a list of field-keyed rows

    Args:
        source: Local path or http(s) URL
        delimiter: Field separator
        timeout: HTTP timeout in seconds

    Returns:
        One dict per data row

    Raises:
        DataUnavailableError: If the source cannot be fetched or parsed
    """
    source = str(source)
    try:
        if _is_url(source):
            response = requests.get(source, timeout=timeout)
            response.raise_for_status()
            frame = pd.read_csv(io.StringIO(response.text), sep=delimiter, skip_blank_lines=True)
        else:
            frame = pd.read_csv(source, sep=delimiter, skip_blank_lines=True)
    except requests.RequestException as e:
        raise DataUnavailableError(f"Failed to fetch {source}: {e}", {'source': source}) from e
    except (OSError, UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise DataUnavailableError(f"Failed to read {source}: {e}", {'source': source}) from e

    frame.columns = [str(c).strip() for c in frame.columns]
    frame = frame.dropna(how='all')
    frame = frame.astype(object).where(pd.notna(frame), None)
    rows = frame.to_dict(orient='records')
    logger.debug(f"Read {len(rows)} rows from {source}")
    return rows


def write_table(rows: Sequence[Dict[str, Any]], path: Union[str, Path], delimiter: str = ";",
                columns: Optional[Sequence[str]] = None) -> Path:
    """Write field-keyed rows as a delimited table"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    pd.DataFrame(list(rows), columns=columns).to_csv(path, sep=delimiter, index=False)
    return path


class DatasetLoader:
    """Loads the configured datasets (the 'data' configuration section)"""

    def __init__(self, config_manager):
        self.config_manager = config_manager
        self.logger = logging.getLogger("hlacontact.io.loader")

    def _setting(self, key: str, default: Any) -> Any:
        return self.config_manager.get(f"data.{key}", default)

    def _source(self, name: str) -> str:
        source = self._setting(name, "")
        if not source:
            raise DataUnavailableError(f"No data source configured for {name}", {'dataset': name})
        return source

    def load_contacts(self) -> ContactDataset:
        """Contact records from data.contacts"""
        rows = read_table(self._source('contacts'),
                          delimiter=self._setting('delimiter', ';'),
                          timeout=self._setting('request_timeout', 30))
        dataset = ContactDataset.from_rows(rows)
        self.logger.info(f"Loaded {len(dataset)} contact records ({dataset.rejected} rejected)")
        return dataset

    def load_sequences(self, locus: Any) -> SequenceTable:
        """Sequence table for *locus* from data.sequences_a / data.sequences_b"""
        locus = Locus.from_value(locus)
        rows = read_table(self._source(f"sequences_{locus.value.lower()}"),
                          delimiter=self._setting('sequence_delimiter', ','),
                          timeout=self._setting('request_timeout', 30))
        max_position = self.config_manager.get('divergence.max_position', MAX_POSITION)
        table = SequenceTable.from_rows(rows, max_position=max_position)
        self.logger.info(f"Loaded {len(table)} locus {locus.value} alleles ({table.rejected} rejected)")
        return table

    def load_datasets(self) -> HLADatasets:
        """Contacts plus both sequence tables; all must load"""
        contacts = self.load_contacts()
        sequences = {locus: self.load_sequences(locus) for locus in Locus}
        return HLADatasets(contacts=contacts, sequences=sequences)

    def load_entropy(self) -> EntropyTable:
        """Entropy table from data.entropy"""
        rows = read_table(self._source('entropy'),
                          delimiter=self._setting('delimiter', ';'),
                          timeout=self._setting('request_timeout', 30))
        table = EntropyTable.from_rows(rows)
        self.logger.info(f"Loaded entropy for {len(table)} positions")
        return table


def read_pairs(path: Union[str, Path]) -> List[Tuple[str, str]]:
    """Allele pairs from a text file, one pair per line

    Alleles are separated by a comma, semicolon, tab or spaces. Blank lines,
    '#' comments and a header line (Pair1/Allele1) are skipped.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DataUnavailableError(f"Failed to read pairs file {path}: {e}", {'source': str(path)}) from e

    pairs: List[Tuple[str, str]] = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith('#'):
            continue
        fields = [f for f in re.split(r"[,;\t ]+", line) if f]
        if fields and fields[0].lower() in ('pair1', 'allele1'):
            continue
        if len(fields) != 2:
            logger.warning(f"{path}:{line_number}: expected two alleles, got {len(fields)}; skipped")
            continue
        pairs.append((fields[0], fields[1]))

    logger.debug(f"Read {len(pairs)} allele pairs from {path}")
    return pairs
