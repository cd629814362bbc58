"""Tests for protein assembly."""

import pytest

from pxevidence.core.context import EvidenceContext
from pxevidence.core.evidence.protein import (
    assemble_proteins,
    build_protein,
    find_database_record,
    index_ions,
    merge_database_metadata,
)
from pxevidence.core.exceptions import DatabaseNotFoundError
from pxevidence.core.models import (
    DatabaseRecord,
    PeptideIonIdentification,
    ProteinEvidence,
    ProteinIdentification,
)

AAA = "AAA#2#500.1234"
BBB = "BBB#2#300.0000"


@pytest.fixture
def proteins(protein_identifications, ions, database, context):
    return {
        p.protein_name: p
        for p in assemble_proteins(protein_identifications, ions, database, context)
    }


def test_unique_and_razor_scenario(proteins):
    p1 = proteins["P1"]
    p2 = proteins["P2"]
    assert set(p1.unique_peptide_ions) == {AAA}
    assert set(p1.urazor_peptide_ions) == {AAA, BBB}
    assert set(p1.total_peptide_ions) == {AAA, BBB}
    assert BBB not in p2.urazor_peptide_ions
    assert set(p2.total_peptide_ions) == {BBB}


def test_unique_subset_of_urazor_subset_of_total(proteins):
    for protein in proteins.values():
        unique = set(protein.unique_peptide_ions)
        urazor = set(protein.urazor_peptide_ions)
        total = set(protein.total_peptide_ions)
        assert unique <= urazor <= total


def test_spectral_counts_and_intensities(proteins):
    p1 = proteins["P1"]
    assert p1.total_spc == 3
    assert p1.unique_spc == 2
    assert p1.urazor_spc == 3
    assert p1.total_intensity == 350.0
    assert p1.unique_intensity == 300.0
    assert p1.supporting_spectra["run1.00003.00003.2"] == 1


def test_urazor_modification_counts(proteins):
    p1 = proteins["P1"]
    assert p1.urazor_modified_observations == 1
    assert p1.urazor_unmodified_observations == 2
    assert "15.9949:Oxidation (Oxidation or Hydroxylation)" in p1.urazor_observed_modifications


def test_decoys_dropped_unless_requested(protein_identifications, ions, database, proteins):
    assert "rev_P3" not in proteins

    context = EvidenceContext(include_decoys=True)
    kept = assemble_proteins(protein_identifications, ions, database, context)
    decoy = {p.protein_name: p for p in kept}["rev_P3"]
    assert decoy.is_decoy
    assert decoy.protein_id == "P3"


def test_sorted_by_group(protein_identifications, ions, database, context):
    result = assemble_proteins(protein_identifications, ions, database, context)
    assert [p.protein_group for p in result] == [1, 2]


def test_database_metadata_merged(proteins):
    p1 = proteins["P1"]
    assert p1.protein_id == "P1"
    assert p1.entry_name == "ONE_HUMAN"
    assert p1.gene_names == "GENE1"
    assert p1.organism == "Homo sapiens"
    assert p1.description == "Protein one"
    assert p1.length == len("MAAAKBBBR")


def test_empty_database_is_fatal(protein_identifications, ions, context):
    with pytest.raises(DatabaseNotFoundError):
        assemble_proteins(protein_identifications, ions, [], context)


def test_missing_ion_gets_empty_shell(context):
    identification = ProteinIdentification(
        group_number=1,
        protein_name="P9",
        peptide_ions=[PeptideIonIdentification("ZZZ", 2, 100.0, is_unique=True)],
    )
    protein = build_protein(identification, index_ions([]), context)
    shell = protein.unique_peptide_ions["ZZZ#2#100.0000"]
    assert shell.spc == 0
    assert shell.sequence == "ZZZ"
    assert protein.total_spc == 0


def test_protein_ion_copies_are_independent(protein_identifications, ions, database, context):
    result = assemble_proteins(protein_identifications, ions, database, context)
    p1, p2 = result[0], result[1]
    assert p1.total_peptide_ions[BBB] is not p2.total_peptide_ions[BBB]
    assert p1.total_peptide_ions[BBB].is_urazor
    assert not p2.total_peptide_ions[BBB].is_urazor


def test_database_match_respects_decoy_status():
    target = DatabaseRecord(original_header="P1 Protein one", part_header="P1")
    decoy = DatabaseRecord(original_header="rev_P1", part_header="rev_P1", is_decoy=True)
    protein = ProteinEvidence(protein_name="rev_P1", protein_group=1, is_decoy=True)

    by_name = {"P1": [target], "rev_P1": [decoy]}
    assert find_database_record(protein, by_name, [target, decoy]) is decoy


def test_database_match_falls_back_to_header_substring():
    record = DatabaseRecord(
        original_header="sp|Q9P243|ZFAT_HUMAN Zinc finger protein ZFAT OS=Homo sapiens",
        part_header="sp|Q9P243|ZFAT_HUMAN",
        id="Q9P243",
        protein_name="Zinc finger protein ZFAT",
    )
    protein = ProteinEvidence(protein_name="ZFAT_HUMAN", protein_group=1)
    merge_database_metadata([protein], [record])
    assert protein.protein_id == "Q9P243"
    assert protein.description == "Zinc finger protein ZFAT"


def test_database_fallback_matches_whole_header_fields():
    record = DatabaseRecord(
        original_header="sp|P10|TEN_HUMAN Protein ten OS=Homo sapiens",
        part_header="sp|P10|TEN_HUMAN",
        id="P10",
        protein_name="Protein ten",
    )
    protein = ProteinEvidence(protein_name="P1", protein_group=1)
    merge_database_metadata([protein], [record])
    assert protein.protein_id == ""
