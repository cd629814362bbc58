"""Tests for Arrow and pandas export of evidence."""

import pyarrow as pa

from pxevidence.core.format import (
    ION_SCHEMA,
    MODIFICATION_SCHEMA,
    PEPTIDE_SCHEMA,
    PROTEIN_SCHEMA,
    PSM_SCHEMA,
)
from pxevidence.core.frames import (
    evidence_to_frames,
    evidence_to_tables,
    ions_to_table,
    mass_bins_to_table,
    proteins_to_table,
    psms_to_table,
)
from pxevidence.core.pipeline import run_pipeline


def _evidence(psm_identifications, protein_identifications, database, unimod_entries, context):
    return run_pipeline(
        psm_identifications, protein_identifications, database, unimod_entries, context
    )


def test_psm_table(labelled_psms):
    table = psms_to_table(labelled_psms)
    assert table.schema.equals(PSM_SCHEMA)
    assert table.num_rows == 4

    rows = {r["spectrum"]: r for r in table.to_pylist()}
    shared = rows["run1.00003.00003.2"]
    assert shared["mapped_proteins"] == ["P1", "P2"]
    assert shared["observed_modifications"] == sorted(shared["observed_modifications"])
    assert shared["calculated_mz"] is not None


def test_ion_table_sorts_list_columns(ions):
    table = ions_to_table(ions)
    assert table.schema.equals(ION_SCHEMA)
    rows = {r["ion_form"]: r for r in table.to_pylist()}
    assert rows["AAA#2#500.1234"]["spectra"] == ["run1.00001.00001.2", "run1.00002.00002.2"]
    assert rows["AAA#2#500.1234"]["spectral_count"] == 2


def test_protein_table(psm_identifications, protein_identifications, database, unimod_entries, context):
    evidence = _evidence(psm_identifications, protein_identifications, database, unimod_entries, context)
    table = proteins_to_table(evidence.proteins)
    assert table.schema.equals(PROTEIN_SCHEMA)
    p1 = table.to_pylist()[0]
    assert p1["protein_name"] == "P1"
    assert p1["urazor_peptide_ions"] == ["AAA#2#500.1234", "BBB#2#300.0000"]
    assert p1["unique_peptide_ions"] == ["AAA#2#500.1234"]


def test_mass_bin_table(psm_identifications, protein_identifications, database, unimod_entries, context):
    evidence = _evidence(psm_identifications, protein_identifications, database, unimod_entries, context)
    bins = evidence.modifications.mass_bins

    full = mass_bins_to_table(bins)
    assert full.schema.equals(MODIFICATION_SCHEMA)
    assert full.num_rows == 10001

    populated = mass_bins_to_table(bins, populated_only=True)
    assert populated.num_rows == 2
    assert sum(populated.column("observed_psms").to_pylist()) == 4


def test_evidence_to_frames(psm_identifications, protein_identifications, database, unimod_entries, context):
    evidence = _evidence(psm_identifications, protein_identifications, database, unimod_entries, context)
    tables = evidence_to_tables(evidence, populated_bins_only=True)
    assert set(tables) == {"psm", "ion", "peptide", "protein", "modification"}
    assert tables["peptide"].schema.equals(PEPTIDE_SCHEMA)

    frames = evidence_to_frames(evidence)
    assert list(frames["peptide"]["sequence"]) == ["AAA", "BBB", "CCC"]
    assert len(frames["protein"]) == 2


def test_empty_collections():
    assert psms_to_table([]).num_rows == 0
    assert isinstance(ions_to_table([]), pa.Table)
