"""PSM consolidation: the canonical PSM evidence collection."""

import logging
from typing import Dict, Iterable, List, Sequence

from pxevidence.core.common import ion_form_key, is_decoy_name
from pxevidence.core.context import EvidenceContext
from pxevidence.core.exceptions import DatabaseNotFoundError, EmptyIdentificationError
from pxevidence.core.models import DatabaseRecord, PSMEvidence, PSMIdentification

logger = logging.getLogger(__name__)


def build_protein_lookup(database: Iterable[DatabaseRecord]) -> Dict[str, DatabaseRecord]:
    """Index database records by their part header (the protein name used upstream)."""
    lookup = {}
    for record in database:
        # first record wins on duplicated headers
        lookup.setdefault(record.part_header, record)
    return lookup


def consolidate_psm(
    identification: PSMIdentification,
    lookup: Dict[str, DatabaseRecord],
    decoy_tag: str,
) -> PSMEvidence:
    """Turn one identification record into PSM evidence."""
    i = identification

    uncalibrated = i.uncalibrated_precursor_neutral_mass
    if uncalibrated <= 0:
        uncalibrated = i.precursor_neutral_mass

    alternatives = [p for p in i.alternative_proteins if p]
    mapped_proteins = set(alternatives)
    if i.protein:
        mapped_proteins.add(i.protein)

    mapped_genes = set()
    for name in mapped_proteins:
        record = lookup.get(name)
        if record is not None and record.gene_names:
            mapped_genes.add(record.gene_names)

    psm = PSMEvidence(
        spectrum=i.spectrum,
        peptide=i.peptide,
        protein=i.protein,
        assumed_charge=i.assumed_charge,
        calc_neutral_pep_mass=i.calc_neutral_pep_mass,
        ion_form=ion_form_key(
            i.peptide, i.modified_peptide, i.assumed_charge, i.calc_neutral_pep_mass
        ),
        modified_peptide=i.modified_peptide,
        source=i.spectrum.split(".")[0],
        spectrum_file=i.spectrum_file,
        scan=i.scan,
        index=i.index,
        hit_rank=i.hit_rank,
        alternative_proteins=alternatives,
        mapped_proteins=mapped_proteins,
        mapped_genes=mapped_genes,
        precursor_neutral_mass=i.precursor_neutral_mass,
        uncalibrated_precursor_neutral_mass=uncalibrated,
        precursor_exp_mass=i.precursor_exp_mass,
        massdiff=i.massdiff,
        retention_time=i.retention_time,
        probability=i.probability,
        expectation=i.expectation,
        xcorr=i.xcorr,
        delta_cn=i.delta_cn,
        delta_cn_star=i.delta_cn_star,
        sp_score=i.sp_score,
        sp_rank=i.sp_rank,
        hyperscore=i.hyperscore,
        nextscore=i.nextscore,
        discriminant_value=i.discriminant_value,
        intensity=i.intensity,
        ion_mobility=i.ion_mobility,
        compensation_voltage=i.compensation_voltage,
        number_of_enzymatic_termini=i.number_of_enzymatic_termini,
        number_of_missed_cleavages=i.number_of_missed_cleavages,
        prev_aa=i.prev_aa,
        next_aa=i.next_aa,
        assigned_mass_diffs=list(i.assigned_mass_diffs),
        is_decoy=is_decoy_name(i.protein, decoy_tag),
        is_unique=len(alternatives) == 0,
    )

    record = lookup.get(i.protein)
    if record is not None:
        psm.gene_name = record.gene_names
        psm.protein_id = record.id
        psm.entry_name = record.entry_name
        psm.protein_description = record.description or record.protein_name

    return psm


def consolidate_psms(
    identifications: Sequence[PSMIdentification],
    database: Sequence[DatabaseRecord],
    context: EvidenceContext,
) -> List[PSMEvidence]:
    """
    Build the PSM evidence collection.

    Args:
        identifications: Validated PSM identification records, in input order
        database: Protein database records used for gene and ID lookups
        context: Run settings (decoy tag)

    Returns:
        PSM evidence sorted by spectrum identifier

    Raises:
        EmptyIdentificationError: if there are no identifications
        DatabaseNotFoundError: if the protein lookup table is empty
    """
    if not identifications:
        raise EmptyIdentificationError()

    lookup = build_protein_lookup(database)
    if not lookup:
        raise DatabaseNotFoundError()

    psms = [consolidate_psm(i, lookup, context.decoy_tag) for i in identifications]

    zero_charge = sum(1 for p in psms if not p.assumed_charge)
    if zero_charge:
        logger.warning(f"{zero_charge:,} PSMs have charge 0, their m/z is undefined")

    unmatched = sum(1 for p in psms if p.protein not in lookup)
    if unmatched:
        logger.debug(f"{unmatched:,} PSMs have no protein database match")

    psms.sort(key=lambda p: p.spectrum)
    logger.info(
        f"Consolidated {len(psms):,} PSMs ({sum(p.is_decoy for p in psms):,} decoys)"
    )
    return psms
