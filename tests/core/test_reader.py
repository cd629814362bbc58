"""Tests for the PSM and protein table readers."""

import pandas as pd
import pytest

from pxevidence.core.reader import (
    protein_frame_to_identifications,
    read_protein_table,
    read_psm_table,
    split_list,
    to_bool,
)

PSM_TSV = (
    "Spectrum\tPeptide\tModified Peptide\tProtein\tMapped Proteins\tCharge\t"
    "Calculated Peptide Mass\tDelta Mass\tPeptideProphet Probability\tIntensity\tassigned_mass_diffs\n"
    "run1.00001.00001.2\tAAA\t\tP1\t\t2\t500.1234\t0.0\t0.9\t100\t\n"
    "run1.00003.00003.2\tBBB\t\tP1\tP2;P3\t2\t300.0\t15.9949\t0.8\t\t0;15.9949\n"
)

PROTEIN_TSV = (
    "group_number\tgroup_sibling_id\tprotein_name\tprobability\tindistinguishable_proteins\t"
    "peptide_sequence\tcharge\tcalc_neutral_pep_mass\tis_unique\trazor\n"
    "1\ta\tP1\t1.0\tP1b\tAAA\t2\t500.1234\ttrue\tfalse\n"
    "1\ta\tP1\t1.0\tP1b\tBBB\t2\t300.0\tfalse\ttrue\n"
    "2\ta\tP2\t0.5\t\tBBB\t2\t300.0\tfalse\tfalse\n"
)


def test_read_psm_table(tmp_path):
    path = tmp_path / "psm.tsv"
    path.write_text(PSM_TSV)

    psms = read_psm_table(path)
    assert len(psms) == 2
    first, second = psms
    assert first.spectrum == "run1.00001.00001.2"
    assert first.assumed_charge == 2
    assert first.alternative_proteins == []
    assert first.modified_peptide == ""
    assert first.probability == 0.9
    assert first.intensity == 100.0
    assert second.alternative_proteins == ["P2", "P3"]
    assert second.assigned_mass_diffs == [0.0, 15.9949]
    assert second.intensity == 0.0


def test_read_psm_parquet(tmp_path):
    path = tmp_path / "psm.parquet"
    pd.DataFrame(
        {
            "spectrum": ["run1.00001.00001.2"],
            "peptide": ["AAA"],
            "protein": ["P1"],
            "alternative_proteins": [["P2"]],
            "assumed_charge": [2],
            "calc_neutral_pep_mass": [500.1234],
        }
    ).to_parquet(path)
    psms = read_psm_table(path)
    assert psms[0].alternative_proteins == ["P2"]


def test_missing_psm_columns(tmp_path):
    path = tmp_path / "psm.tsv"
    path.write_text("Spectrum\tPeptide\nrun1.00001.00001.2\tAAA\n")
    with pytest.raises(ValueError, match="protein"):
        read_psm_table(path)


def test_read_protein_table_groups_rows(tmp_path):
    path = tmp_path / "protein.tsv"
    path.write_text(PROTEIN_TSV)

    proteins = read_protein_table(path)
    assert [p.protein_name for p in proteins] == ["P1", "P2"]
    p1 = proteins[0]
    assert p1.group_number == 1
    assert p1.indistinguishable_proteins == ["P1b"]
    assert [i.peptide_sequence for i in p1.peptide_ions] == ["AAA", "BBB"]
    assert p1.peptide_ions[0].is_unique and not p1.peptide_ions[0].razor
    assert p1.peptide_ions[1].razor
    assert proteins[1].indistinguishable_proteins == []


def test_protein_without_peptide_rows():
    df = pd.DataFrame(
        {
            "group_number": [4],
            "protein_name": ["P4"],
            "peptide_sequence": [None],
            "charge": [None],
            "calc_neutral_pep_mass": [None],
        }
    )
    proteins = protein_frame_to_identifications(df)
    assert proteins[0].peptide_ions == []


@pytest.mark.parametrize(
    "value,expected",
    [("a;b; c", ["a", "b", "c"]), ("", []), (float("nan"), []), (None, []), (["x"], ["x"])],
)
def test_split_list(value, expected):
    assert split_list(value) == expected


@pytest.mark.parametrize("value,expected", [("true", True), ("False", False), (1, True), (None, False)])
def test_to_bool(value, expected):
    assert to_bool(value) is expected
