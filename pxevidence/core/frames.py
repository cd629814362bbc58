"""
Conversion of evidence collections into Arrow tables and pandas frames.

Every set or counter is emitted as a sorted list so the exported tables do
not depend on hash iteration order.
"""

from typing import Dict, Sequence

import pandas as pd
import pyarrow as pa

from pxevidence.core.format import (
    ION_SCHEMA,
    MODIFICATION_SCHEMA,
    PEPTIDE_SCHEMA,
    PROTEIN_SCHEMA,
    PSM_SCHEMA,
)
from pxevidence.core.models import (
    Evidence,
    IonEvidence,
    MassBin,
    PeptideEvidence,
    ProteinEvidence,
    PSMEvidence,
)


def psm_row(psm: PSMEvidence) -> dict:
    return {
        "spectrum": psm.spectrum,
        "source": psm.source,
        "spectrum_file": psm.spectrum_file,
        "scan": psm.scan,
        "peptide": psm.peptide,
        "modified_peptide": psm.modified_peptide,
        "ion_form": psm.ion_form,
        "prev_aa": psm.prev_aa,
        "next_aa": psm.next_aa,
        "assumed_charge": psm.assumed_charge,
        "hit_rank": psm.hit_rank,
        "retention_time": psm.retention_time,
        "observed_mz": psm.observed_mz,
        "calibrated_observed_mz": psm.calibrated_observed_mz,
        "calculated_mz": psm.calculated_mz,
        "precursor_neutral_mass": psm.precursor_neutral_mass,
        "uncalibrated_precursor_neutral_mass": psm.uncalibrated_precursor_neutral_mass,
        "calc_neutral_pep_mass": psm.calc_neutral_pep_mass,
        "massdiff": psm.massdiff,
        "probability": psm.probability,
        "expectation": psm.expectation,
        "hyperscore": psm.hyperscore,
        "nextscore": psm.nextscore,
        "xcorr": psm.xcorr,
        "delta_cn": psm.delta_cn,
        "discriminant_value": psm.discriminant_value,
        "intensity": psm.intensity,
        "ion_mobility": psm.ion_mobility,
        "compensation_voltage": psm.compensation_voltage,
        "number_of_enzymatic_termini": psm.number_of_enzymatic_termini,
        "number_of_missed_cleavages": psm.number_of_missed_cleavages,
        "protein": psm.protein,
        "protein_id": psm.protein_id,
        "entry_name": psm.entry_name,
        "gene_name": psm.gene_name,
        "protein_description": psm.protein_description,
        "mapped_proteins": sorted(psm.mapped_proteins),
        "mapped_genes": sorted(psm.mapped_genes),
        "assigned_modifications": sorted(psm.assigned_modifications),
        "observed_modifications": sorted(psm.observed_modifications),
        "is_decoy": psm.is_decoy,
        "is_unique": psm.is_unique,
        "is_urazor": psm.is_urazor,
    }


def ion_row(ion: IonEvidence) -> dict:
    return {
        "ion_form": ion.ion_form,
        "sequence": ion.sequence,
        "modified_sequence": ion.modified_sequence,
        "charge_state": ion.charge_state,
        "mz": ion.mz,
        "peptide_mass": ion.peptide_mass,
        "precursor_neutral_mass": ion.precursor_neutral_mass,
        "protein": ion.protein,
        "spectra": sorted(ion.spectra),
        "spectral_count": ion.spc,
        "mapped_proteins": sorted(ion.mapped_proteins),
        "probability": ion.probability,
        "expectation": ion.expectation,
        "assigned_modifications": sorted(ion.assigned_modifications),
        "observed_modifications": sorted(ion.observed_modifications),
        "modified_observations": ion.modified_observations,
        "unmodified_observations": ion.unmodified_observations,
        "intensity": ion.intensity,
        "is_decoy": ion.is_decoy,
        "is_unique": ion.is_nondegenerate_evidence,
        "is_urazor": ion.is_urazor,
    }


def peptide_row(peptide: PeptideEvidence) -> dict:
    return {
        "sequence": peptide.sequence,
        "charge_states": sorted(peptide.charge_states),
        "spectral_count": peptide.spc,
        "intensity": peptide.intensity,
        "probability": peptide.probability,
        "mapped_proteins": sorted(peptide.mapped_proteins),
        "modified_observations": peptide.modified_observations,
        "unmodified_observations": peptide.unmodified_observations,
    }


def protein_row(protein: ProteinEvidence) -> dict:
    return {
        "protein_group": protein.protein_group,
        "protein_subgroup": protein.protein_subgroup,
        "protein_name": protein.protein_name,
        "protein_id": protein.protein_id,
        "entry_name": protein.entry_name,
        "gene_names": protein.gene_names,
        "description": protein.description,
        "organism": protein.organism,
        "protein_existence": protein.protein_existence,
        "length": protein.length,
        "coverage": protein.coverage,
        "probability": protein.probability,
        "top_pep_prob": protein.top_pep_prob,
        "is_decoy": protein.is_decoy,
        "is_contaminant": protein.is_contaminant,
        "unique_stripped_peptides": protein.unique_stripped_peptides,
        "indistinguishable_proteins": sorted(protein.indistinguishable_proteins),
        "total_peptide_ions": sorted(protein.total_peptide_ions),
        "unique_peptide_ions": sorted(protein.unique_peptide_ions),
        "urazor_peptide_ions": sorted(protein.urazor_peptide_ions),
        "total_spectral_count": protein.total_spc,
        "unique_spectral_count": protein.unique_spc,
        "urazor_spectral_count": protein.urazor_spc,
        "total_intensity": protein.total_intensity,
        "unique_intensity": protein.unique_intensity,
        "urazor_intensity": protein.urazor_intensity,
        "urazor_modified_observations": protein.urazor_modified_observations,
        "urazor_unmodified_observations": protein.urazor_unmodified_observations,
        "urazor_assigned_modifications": sorted(protein.urazor_assigned_modifications),
        "urazor_observed_modifications": sorted(protein.urazor_observed_modifications),
    }


def mass_bin_row(mass_bin: MassBin) -> dict:
    return {
        "lower_mass": mass_bin.lower_mass,
        "higher_mass": mass_bin.higher_mass,
        "mass_center": mass_bin.mass_center,
        "average_mass": mass_bin.average_mass,
        "corrected_mass": mass_bin.corrected_mass,
        "assigned_psms": len(mass_bin.assigned_mods),
        "observed_psms": len(mass_bin.observed_mods),
        "assigned_spectra": sorted(p.spectrum for p in mass_bin.assigned_mods),
        "observed_spectra": sorted(p.spectrum for p in mass_bin.observed_mods),
    }


def psms_to_table(psms: Sequence[PSMEvidence]) -> pa.Table:
    return pa.Table.from_pylist([psm_row(p) for p in psms], schema=PSM_SCHEMA)


def ions_to_table(ions: Sequence[IonEvidence]) -> pa.Table:
    return pa.Table.from_pylist([ion_row(i) for i in ions], schema=ION_SCHEMA)


def peptides_to_table(peptides: Sequence[PeptideEvidence]) -> pa.Table:
    return pa.Table.from_pylist([peptide_row(p) for p in peptides], schema=PEPTIDE_SCHEMA)


def proteins_to_table(proteins: Sequence[ProteinEvidence]) -> pa.Table:
    return pa.Table.from_pylist([protein_row(p) for p in proteins], schema=PROTEIN_SCHEMA)


def mass_bins_to_table(mass_bins: Sequence[MassBin], populated_only: bool = False) -> pa.Table:
    """Convert mass bins, optionally keeping only bins with at least one PSM."""
    if populated_only:
        mass_bins = [b for b in mass_bins if b.assigned_mods or b.observed_mods]
    return pa.Table.from_pylist([mass_bin_row(b) for b in mass_bins], schema=MODIFICATION_SCHEMA)


def evidence_to_tables(evidence: Evidence, populated_bins_only: bool = False) -> Dict[str, pa.Table]:
    """Arrow tables of every collection, keyed by collection name."""
    return {
        "psm": psms_to_table(evidence.psms),
        "ion": ions_to_table(evidence.ions),
        "peptide": peptides_to_table(evidence.peptides),
        "protein": proteins_to_table(evidence.proteins),
        "modification": mass_bins_to_table(
            evidence.modifications.mass_bins, populated_only=populated_bins_only
        ),
    }


def evidence_to_frames(evidence: Evidence, populated_bins_only: bool = False) -> Dict[str, pd.DataFrame]:
    """pandas DataFrames of every collection, keyed by collection name."""
    return {
        name: table.to_pandas()
        for name, table in evidence_to_tables(evidence, populated_bins_only).items()
    }
