"""
Protein assembly.

Each protein entry reported by the protein inference step is turned into
protein evidence holding three peptide ion maps:

    Total   every peptide ion listed under the protein
    Unique  ions the inference step flagged as unique to the protein
    URazor  Unique plus ions razor-assigned to the protein

The razor decision is taken as given, it is never recomputed here.
"""

import copy
import logging
import re
from typing import Dict, Iterable, List, Optional, Sequence

from pxevidence.core.common import has_tag, ion_form_key, is_decoy_name
from pxevidence.core.context import EvidenceContext
from pxevidence.core.exceptions import DatabaseNotFoundError
from pxevidence.core.models import (
    DatabaseRecord,
    IonEvidence,
    PeptideIonIdentification,
    ProteinEvidence,
    ProteinIdentification,
)
from pxevidence.utils.intensity_utils import calculate_total_intensity

logger = logging.getLogger(__name__)


def index_ions(ions: Iterable[IonEvidence]) -> Dict[str, IonEvidence]:
    return {ion.ion_form: ion for ion in ions}


def peptide_ion_key(peptide_ion: PeptideIonIdentification) -> str:
    return ion_form_key(
        peptide_ion.peptide_sequence,
        peptide_ion.modified_peptide,
        peptide_ion.charge,
        peptide_ion.calc_neutral_pep_mass,
    )


def _empty_ion_shell(key: str, peptide_ion: PeptideIonIdentification) -> IonEvidence:
    return IonEvidence(
        ion_form=key,
        sequence=peptide_ion.peptide_sequence,
        modified_sequence=peptide_ion.modified_peptide,
        charge_state=peptide_ion.charge,
        peptide_mass=peptide_ion.calc_neutral_pep_mass,
    )


def _protein_ion_view(
    key: str, peptide_ion: PeptideIonIdentification, evidence: Optional[IonEvidence]
) -> IonEvidence:
    """Copy of the ion record annotated with this protein's inference flags."""
    if evidence is None:
        view = _empty_ion_shell(key, peptide_ion)
    else:
        view = copy.copy(evidence)
        view.spectra = evidence.spectra.copy()
        view.mapped_proteins = set(evidence.mapped_proteins)
        view.assigned_modifications = evidence.assigned_modifications.copy()
        view.observed_modifications = evidence.observed_modifications.copy()
    view.weight = peptide_ion.weight
    view.group_weight = peptide_ion.group_weight
    view.is_nondegenerate_evidence = peptide_ion.is_nondegenerate_evidence
    view.is_urazor = bool(peptide_ion.razor)
    return view


def _add_urazor_counts(protein: ProteinEvidence, ion: IonEvidence) -> None:
    protein.urazor_unmodified_observations += ion.unmodified_observations
    protein.urazor_modified_observations += ion.modified_observations
    protein.urazor_assigned_modifications.update(ion.assigned_modifications)
    protein.urazor_observed_modifications.update(ion.observed_modifications)


def build_protein(
    identification: ProteinIdentification,
    evidence_ions: Dict[str, IonEvidence],
    context: EvidenceContext,
) -> ProteinEvidence:
    """Build the Total, Unique and URazor ion maps and their totals for one protein."""
    i = identification
    protein = ProteinEvidence(
        protein_name=i.protein_name,
        protein_group=i.group_number,
        protein_subgroup=i.group_sibling_id,
        length=i.length,
        coverage=i.percent_coverage,
        probability=i.probability,
        top_pep_prob=i.top_pep_prob,
        description=i.description,
        unique_stripped_peptides=len(i.unique_stripped_peptides),
        indistinguishable_proteins=set(i.indistinguishable_proteins),
        is_decoy=is_decoy_name(i.protein_name, context.decoy_tag),
        is_contaminant=has_tag(i.protein_name, context.contaminant_tag),
    )

    for peptide_ion in i.peptide_ions:
        key = peptide_ion_key(peptide_ion)
        evidence = evidence_ions.get(key)
        if evidence is None:
            logger.debug(f"{key} of {i.protein_name} has no ion evidence")
        else:
            protein.supporting_spectra.update(evidence.spectra)

        ion = _protein_ion_view(key, peptide_ion, evidence)
        protein.total_peptide_ions[key] = ion

        if peptide_ion.is_unique:
            protein.unique_peptide_ions[key] = ion
            protein.urazor_peptide_ions[key] = ion
            _add_urazor_counts(protein, ion)

        if peptide_ion.razor:
            protein.urazor_peptide_ions[key] = ion
            _add_urazor_counts(protein, ion)

    _sum_protein_totals(protein)
    return protein


def _sum_protein_totals(protein: ProteinEvidence) -> None:
    total = protein.total_peptide_ions.values()
    unique = protein.unique_peptide_ions.values()
    urazor = protein.urazor_peptide_ions.values()

    protein.total_spc = sum(ion.spc for ion in total)
    protein.unique_spc = sum(ion.spc for ion in unique)
    protein.urazor_spc = sum(ion.spc for ion in urazor)

    protein.total_intensity = calculate_total_intensity(ion.intensity for ion in total)
    protein.unique_intensity = calculate_total_intensity(ion.intensity for ion in unique)
    protein.urazor_intensity = calculate_total_intensity(ion.intensity for ion in urazor)


def find_database_record(
    protein: ProteinEvidence,
    by_name: Dict[str, List[DatabaseRecord]],
    database: Sequence[DatabaseRecord],
) -> Optional[DatabaseRecord]:
    """
    Find the database record of a protein with the same decoy status.

    Exact matches on the part header or accession are tried first, then a
    search for the name as whole "|"-separated fields of the header's
    identifier, so "P1" never matches "P10".
    """
    for record in by_name.get(protein.protein_name, []):
        if record.is_decoy == protein.is_decoy:
            return record

    pattern = re.compile(r"(?:^|\|)" + re.escape(protein.protein_name) + r"(?:\||$)")
    for record in database:
        if record.is_decoy != protein.is_decoy:
            continue
        identifier = (record.original_header.split() or [""])[0]
        if pattern.search(identifier):
            return record
    return None


def merge_database_metadata(
    proteins: Sequence[ProteinEvidence], database: Sequence[DatabaseRecord]
) -> None:
    by_name: Dict[str, List[DatabaseRecord]] = {}
    for record in database:
        by_name.setdefault(record.part_header, []).append(record)
        if record.id and record.id != record.part_header:
            by_name.setdefault(record.id, []).append(record)

    unmatched = 0
    for protein in proteins:
        record = find_database_record(protein, by_name, database)
        if record is None:
            unmatched += 1
            continue
        protein.original_header = record.original_header
        protein.protein_id = record.id
        protein.entry_name = record.entry_name
        protein.protein_existence = record.protein_existence
        protein.gene_names = record.gene_names
        protein.sequence = record.sequence
        protein.organism = record.organism
        protein.is_contaminant = protein.is_contaminant or record.is_contaminant
        # UniProt entries carry the description in the protein name
        protein.description = record.description or record.protein_name
        if not protein.length:
            protein.length = len(record.sequence)

    if unmatched:
        logger.warning(f"{unmatched:,} proteins have no protein database match")


def assemble_proteins(
    identifications: Sequence[ProteinIdentification],
    ions: Sequence[IonEvidence],
    database: Sequence[DatabaseRecord],
    context: EvidenceContext,
) -> List[ProteinEvidence]:
    """
    Build the protein evidence collection.

    Args:
        identifications: Protein entries from the protein inference step
        ions: Peptide ion evidence
        database: Protein database records
        context: Run settings (decoy tag, decoy inclusion)

    Returns:
        Protein evidence sorted by group number

    Raises:
        DatabaseNotFoundError: if there are no database records
    """
    if not database:
        raise DatabaseNotFoundError()

    evidence_ions = index_ions(ions)

    proteins = []
    dropped = 0
    for identification in identifications:
        if is_decoy_name(identification.protein_name, context.decoy_tag) and not context.include_decoys:
            dropped += 1
            continue
        proteins.append(build_protein(identification, evidence_ions, context))

    merge_database_metadata(proteins, database)

    proteins.sort(key=lambda p: (p.protein_group, p.protein_subgroup))
    logger.info(f"Assembled {len(proteins):,} proteins ({dropped:,} decoys dropped)")
    return proteins
