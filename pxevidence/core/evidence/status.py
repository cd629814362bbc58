"""
Back-fill of unique and razor status onto PSMs and ions.

Whether an ion is unique or razor-assigned is only known once every protein
has been assembled, so the flags computed at the protein level are pushed
back onto the finer levels here. Flags are only ever raised, never
cleared. Lookups go through the ion-form key, never through positions in
the collections.
"""

import dataclasses
import logging
from typing import Iterable, List, Sequence, Set, Tuple

from pxevidence.core.models import IonEvidence, ProteinEvidence, PSMEvidence

logger = logging.getLogger(__name__)


def collect_status_keys(proteins: Iterable[ProteinEvidence]) -> Tuple[Set[str], Set[str]]:
    """Return the ion-form keys found in any Unique map and in any URazor map."""
    unique_keys = set()
    urazor_keys = set()
    for protein in proteins:
        unique_keys.update(protein.unique_peptide_ions)
        urazor_keys.update(protein.urazor_peptide_ions)
    return unique_keys, urazor_keys


def propagate_status(
    psms: Sequence[PSMEvidence],
    ions: Sequence[IonEvidence],
    proteins: Sequence[ProteinEvidence],
) -> Tuple[List[PSMEvidence], List[IonEvidence]]:
    """
    Raise the unique and razor flags of every PSM and ion found in protein evidence.

    Args:
        psms: Consolidated PSM evidence
        ions: Peptide ion evidence
        proteins: Assembled protein evidence

    Returns:
        Updated copies of the PSM and ion collections, in the same order
    """
    unique_keys, urazor_keys = collect_status_keys(proteins)

    updated_psms = [
        dataclasses.replace(
            psm,
            is_unique=psm.is_unique or psm.ion_form in unique_keys,
            is_urazor=psm.is_urazor or psm.ion_form in urazor_keys,
        )
        for psm in psms
    ]
    updated_ions = [
        dataclasses.replace(
            ion,
            is_nondegenerate_evidence=ion.is_nondegenerate_evidence or ion.ion_form in unique_keys,
            is_urazor=ion.is_urazor or ion.ion_form in urazor_keys,
        )
        for ion in ions
    ]

    logger.info(
        f"Propagated status: {sum(p.is_unique for p in updated_psms):,} unique and "
        f"{sum(p.is_urazor for p in updated_psms):,} unique+razor PSMs"
    )
    return updated_psms, updated_ions
