"""
Readers for identification tables.

PSM tables hold one row per PSM, protein tables one row per
protein / peptide-ion pair. Both accept TSV, CSV or parquet; list-valued
columns are ";"-separated in text files and list columns in parquet.
"""

import dataclasses
import logging
from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, List, Union

import pandas as pd

from pxevidence.core.common import (
    LIST_SEPARATOR,
    PROTEIN_LIST_COLUMNS,
    PROTEIN_REQUIRED_COLUMNS,
    PSM_COLUMN_MAP,
    PSM_FLOAT_LIST_COLUMNS,
    PSM_LIST_COLUMNS,
    PSM_REQUIRED_COLUMNS,
)
from pxevidence.core.models import (
    PeptideIonIdentification,
    ProteinIdentification,
    PSMIdentification,
)

logger = logging.getLogger(__name__)

PROTEIN_FIELDS = {f.name for f in dataclasses.fields(ProteinIdentification)} - {"peptide_ions"}
PEPTIDE_ION_FIELDS = {f.name for f in dataclasses.fields(PeptideIonIdentification)}
PSM_FIELDS = {f.name for f in dataclasses.fields(PSMIdentification)}

_TRUE_VALUES = {"true", "t", "yes", "y", "1"}


def read_table(path: Union[str, Path]) -> pd.DataFrame:
    """Read a TSV, CSV or parquet file into a DataFrame."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".parquet":
        df = pd.read_parquet(path)
    elif suffix == ".csv":
        df = pd.read_csv(path, low_memory=False)
    else:
        df = pd.read_csv(path, sep="\t", low_memory=False)
    df.columns = df.columns.str.strip()
    return df


def _check_columns(df: pd.DataFrame, required: List[str], path) -> None:
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns in {path}: {', '.join(missing)}")


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float):
        return pd.isna(value)
    return False


def split_list(value: Any) -> List[str]:
    """Split a ";"-separated cell into a list, passing list cells through."""
    if _is_missing(value):
        return []
    if isinstance(value, str):
        return [v.strip() for v in value.split(LIST_SEPARATOR) if v.strip()]
    # single-valued columns are parsed as numbers
    if isinstance(value, (int, float)):
        return [str(value)]
    return [str(v) for v in value if not _is_missing(v)]


def split_float_list(value: Any) -> List[float]:
    return [float(v) for v in split_list(value)]


def to_bool(value: Any) -> bool:
    if _is_missing(value):
        return False
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    return bool(value)


def _coerce(record: Dict[str, Any], cls) -> Dict[str, Any]:
    """Cast the scalar cells of a row to the field types of a dataclass."""
    result = {}
    for f in dataclasses.fields(cls):
        if f.name not in record:
            continue
        value = record[f.name]
        if f.type in (int, float, str, bool) and _is_missing(value):
            continue
        if f.type is int:
            value = int(value)
        elif f.type is float:
            value = float(value)
        elif f.type is str:
            value = str(value)
        elif f.type is bool:
            value = to_bool(value)
        result[f.name] = value
    return result


# ============================================================================
# PSM tables
# ============================================================================


def psm_frame_to_identifications(df: pd.DataFrame) -> List[PSMIdentification]:
    """Convert a PSM DataFrame (snake_case or report-style headers) into records."""
    df = df.rename(columns={k: v for k, v in PSM_COLUMN_MAP.items() if k in df.columns})
    _check_columns(df, PSM_REQUIRED_COLUMNS, "PSM table")

    columns = [c for c in df.columns if c in PSM_FIELDS]
    identifications = []
    for row in df[columns].to_dict(orient="records"):
        for column in PSM_LIST_COLUMNS:
            row[column] = split_list(row.get(column))
        for column in PSM_FLOAT_LIST_COLUMNS:
            row[column] = split_float_list(row.get(column))
        identifications.append(PSMIdentification(**_coerce(row, PSMIdentification)))
    return identifications


def read_psm_table(path: Union[str, Path]) -> List[PSMIdentification]:
    """
    Read validated PSM identifications.

    Args:
        path: TSV, CSV or parquet file with one row per PSM

    Returns:
        PSM identification records in file order
    """
    df = read_table(path)
    identifications = psm_frame_to_identifications(df)
    logger.info(f"Read {len(identifications):,} PSM identifications from {path}")
    return identifications


# ============================================================================
# Protein tables
# ============================================================================


def protein_frame_to_identifications(df: pd.DataFrame) -> List[ProteinIdentification]:
    """
    Group protein / peptide-ion rows into protein identifications.

    Protein-level columns are taken from the first row of each
    (group_number, protein_name) pair; proteins keep file order.
    """
    _check_columns(df, PROTEIN_REQUIRED_COLUMNS, "protein table")

    proteins = OrderedDict()
    for row in df.to_dict(orient="records"):
        for column in PROTEIN_LIST_COLUMNS:
            if column in row:
                row[column] = split_list(row[column])

        key = (int(row["group_number"]), str(row["protein_name"]))
        protein = proteins.get(key)
        if protein is None:
            fields = {k: v for k, v in row.items() if k in PROTEIN_FIELDS}
            protein = ProteinIdentification(**_coerce(fields, ProteinIdentification))
            proteins[key] = protein

        if _is_missing(row.get("peptide_sequence")):
            continue
        fields = {k: v for k, v in row.items() if k in PEPTIDE_ION_FIELDS}
        protein.peptide_ions.append(
            PeptideIonIdentification(**_coerce(fields, PeptideIonIdentification))
        )
    return list(proteins.values())


def read_protein_table(path: Union[str, Path]) -> List[ProteinIdentification]:
    """
    Read protein group identifications.

    Args:
        path: TSV, CSV or parquet file with one row per protein / peptide-ion pair

    Returns:
        Protein identification records in file order
    """
    df = read_table(path)
    identifications = protein_frame_to_identifications(df)
    logger.info(f"Read {len(identifications):,} protein identifications from {path}")
    return identifications
