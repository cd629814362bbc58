"""Shared fixtures: a small two-protein run with one decoy PSM."""

import pytest

from pxevidence.core.context import EvidenceContext
from pxevidence.core.evidence.ion import aggregate_ions
from pxevidence.core.evidence.psm import consolidate_psms
from pxevidence.core.models import (
    DatabaseRecord,
    PeptideIonIdentification,
    ProteinIdentification,
    PSMIdentification,
    UniModEntry,
)
from pxevidence.core.modification.unimod import map_mass_diff_to_unimod


@pytest.fixture
def context():
    return EvidenceContext()


@pytest.fixture
def database():
    return [
        DatabaseRecord(
            original_header="P1 Protein one OS=Homo sapiens GN=GENE1 PE=1",
            part_header="P1",
            id="P1",
            entry_name="ONE_HUMAN",
            protein_name="Protein one",
            gene_names="GENE1",
            organism="Homo sapiens",
            protein_existence="1",
            sequence="MAAAKBBBR",
        ),
        DatabaseRecord(
            original_header="P2 Protein two OS=Homo sapiens GN=GENE2 PE=1",
            part_header="P2",
            id="P2",
            entry_name="TWO_HUMAN",
            protein_name="Protein two",
            gene_names="GENE2",
            organism="Homo sapiens",
            protein_existence="1",
            sequence="MBBBRK",
        ),
        DatabaseRecord(
            original_header="rev_P3",
            part_header="rev_P3",
            id="P3",
            sequence="KCCCM",
            is_decoy=True,
        ),
    ]


@pytest.fixture
def unimod_entries():
    return [
        UniModEntry("UNIMOD:21", "Phospho", 79.9663, "O-phospho"),
        UniModEntry("UNIMOD:35", "Oxidation", 15.994915, "Oxidation or Hydroxylation"),
        UniModEntry("UNIMOD:540", "Ala->Ser", 15.994915, "Ala->Ser substitution"),
        UniModEntry("UNIMOD:4", "Carbamidomethyl", 57.021464, "Iodoacetamide derivative"),
    ]


@pytest.fixture
def psm_identifications():
    return [
        PSMIdentification(
            spectrum="run1.00003.00003.2",
            peptide="BBB",
            protein="P1",
            alternative_proteins=["P2"],
            assumed_charge=2,
            calc_neutral_pep_mass=300.0,
            precursor_neutral_mass=315.9949,
            massdiff=15.9949,
            probability=0.8,
            intensity=50.0,
        ),
        PSMIdentification(
            spectrum="run1.00001.00001.2",
            peptide="AAA",
            protein="P1",
            assumed_charge=2,
            calc_neutral_pep_mass=500.1234,
            precursor_neutral_mass=500.1234,
            massdiff=0.0,
            probability=0.9,
            intensity=100.0,
        ),
        PSMIdentification(
            spectrum="run1.00002.00002.2",
            peptide="AAA",
            protein="P1",
            assumed_charge=2,
            calc_neutral_pep_mass=500.1234,
            precursor_neutral_mass=500.1334,
            massdiff=0.01,
            probability=0.95,
            intensity=300.0,
        ),
        PSMIdentification(
            spectrum="run1.00004.00004.3",
            peptide="CCC",
            protein="rev_P3",
            assumed_charge=3,
            calc_neutral_pep_mass=400.0,
            precursor_neutral_mass=400.0,
            massdiff=0.0,
            probability=0.1,
            intensity=10.0,
        ),
    ]


@pytest.fixture
def protein_identifications():
    return [
        ProteinIdentification(
            group_number=2,
            protein_name="P2",
            group_sibling_id="a",
            probability=0.5,
            peptide_ions=[
                PeptideIonIdentification("BBB", 2, 300.0, weight=0.0),
            ],
        ),
        ProteinIdentification(
            group_number=1,
            protein_name="P1",
            group_sibling_id="a",
            probability=1.0,
            percent_coverage=66.7,
            unique_stripped_peptides=["AAA"],
            peptide_ions=[
                PeptideIonIdentification("AAA", 2, 500.1234, is_unique=True, weight=1.0),
                PeptideIonIdentification("BBB", 2, 300.0, razor=True, weight=1.0),
            ],
        ),
        ProteinIdentification(
            group_number=3,
            protein_name="rev_P3",
            group_sibling_id="a",
            peptide_ions=[
                PeptideIonIdentification("CCC", 3, 400.0, is_unique=True),
            ],
        ),
    ]


@pytest.fixture
def labelled_psms(psm_identifications, database, unimod_entries, context):
    psms = consolidate_psms(psm_identifications, database, context)
    return map_mass_diff_to_unimod(psms, unimod_entries, context)


@pytest.fixture
def ions(labelled_psms, context):
    return aggregate_ions(labelled_psms, context)
