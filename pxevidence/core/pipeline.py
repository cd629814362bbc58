"""The staged evidence pipeline."""

import logging
from typing import Optional, Sequence

from pxevidence.core.context import EvidenceContext
from pxevidence.core.evidence.ion import aggregate_ions
from pxevidence.core.evidence.peptide import aggregate_peptides
from pxevidence.core.evidence.protein import assemble_proteins
from pxevidence.core.evidence.psm import consolidate_psms
from pxevidence.core.evidence.status import propagate_status
from pxevidence.core.models import (
    DatabaseRecord,
    Evidence,
    ProteinIdentification,
    PSMIdentification,
    UniModEntry,
)
from pxevidence.core.modification.binning import assemble_mass_bins
from pxevidence.core.modification.unimod import map_mass_diff_to_unimod

logger = logging.getLogger(__name__)


def run_pipeline(
    psm_identifications: Sequence[PSMIdentification],
    protein_identifications: Sequence[ProteinIdentification],
    database: Sequence[DatabaseRecord],
    unimod: Sequence[UniModEntry],
    context: Optional[EvidenceContext] = None,
) -> Evidence:
    """
    Run every aggregation stage and return the evidence of one run.

    Stages run in order: PSM consolidation, UniMod labelling, ion and
    peptide aggregation, protein assembly, status propagation back onto
    PSMs and ions, and mass-difference binning. Any fatal error stops the
    run before an Evidence object exists.

    Args:
        psm_identifications: Validated PSM identification records
        protein_identifications: Protein group identification records
        database: Protein database records
        unimod: Reference modification table
        context: Run settings, defaults when omitted

    Returns:
        Evidence with all collections sorted by their report keys
    """
    context = context or EvidenceContext()

    psms = consolidate_psms(psm_identifications, database, context)
    psms = map_mass_diff_to_unimod(psms, unimod, context)

    ions = aggregate_ions(psms, context)
    peptides = aggregate_peptides(ions, psms, context)
    proteins = assemble_proteins(protein_identifications, ions, database, context)

    psms, ions = propagate_status(psms, ions, proteins)

    modifications = assemble_mass_bins(psms, context)

    logger.info(
        f"Evidence: {len(psms):,} PSMs, {len(ions):,} ions, "
        f"{len(peptides):,} peptides, {len(proteins):,} proteins"
    )
    return Evidence(
        psms=psms,
        ions=ions,
        peptides=peptides,
        proteins=proteins,
        modifications=modifications,
    )
