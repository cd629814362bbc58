"""Peptide ion aggregation: PSMs grouped by ion-form key."""

import logging
from collections import OrderedDict
from typing import Dict, List, Sequence

from pxevidence.core.common import calculate_mz, is_unmodified_mass
from pxevidence.core.context import EvidenceContext
from pxevidence.core.models import IonEvidence, PSMEvidence
from pxevidence.utils.intensity_utils import calculate_apex_intensity

logger = logging.getLogger(__name__)


def group_psms_by_ion(psms: Sequence[PSMEvidence]) -> Dict[str, List[PSMEvidence]]:
    """Group PSMs by ion-form key, keeping first-seen key order."""
    groups = OrderedDict()
    for psm in psms:
        groups.setdefault(psm.ion_form, []).append(psm)
    return groups


def build_ion(ion_form: str, group: List[PSMEvidence], threshold: float) -> IonEvidence:
    """
    Collapse the PSMs of one ion-form key into ion evidence.

    Scalar fields come from the first PSM of the group (first-wins), the
    probability is the best one, spectra, proteins and modification labels
    are complete unions.
    """
    first = group[0]
    mz = calculate_mz(first.calc_neutral_pep_mass, first.assumed_charge)

    ion = IonEvidence(
        ion_form=ion_form,
        sequence=first.peptide,
        modified_sequence=first.modified_peptide,
        charge_state=first.assumed_charge,
        peptide_mass=first.calc_neutral_pep_mass,
        mz=round(mz, 4) if mz is not None else None,
        precursor_neutral_mass=first.precursor_neutral_mass,
        protein=first.protein,
        expectation=first.expectation,
        is_nondegenerate_evidence=first.is_unique,
        is_urazor=first.is_urazor,
        is_decoy=first.is_decoy,
    )

    for psm in group:
        ion.spectra[psm.spectrum] += 1
        ion.mapped_proteins.update(psm.mapped_proteins)
        if psm.probability > ion.probability:
            ion.probability = psm.probability
        ion.assigned_modifications.update(psm.assigned_modifications)
        ion.observed_modifications.update(psm.observed_modifications)
        if is_unmodified_mass(psm.massdiff, threshold):
            ion.unmodified_observations += 1
        else:
            ion.modified_observations += 1

    if not ion.observed_modifications and ion.unmodified_observations == 0:
        ion.unmodified_observations = 1

    ion.intensity = calculate_apex_intensity(p.intensity for p in group)
    return ion


def aggregate_ions(psms: Sequence[PSMEvidence], context: EvidenceContext) -> List[IonEvidence]:
    """
    Build the peptide ion evidence collection from consolidated PSMs.

    Args:
        psms: Consolidated PSM evidence
        context: Run settings (unmodified mass threshold)

    Returns:
        One ion per distinct ion-form key, sorted by sequence then key
    """
    groups = group_psms_by_ion(psms)
    ions = [
        build_ion(key, group, context.unmodified_mass_threshold)
        for key, group in groups.items()
    ]
    ions.sort(key=lambda i: (i.sequence, i.ion_form))
    logger.info(f"Aggregated {len(psms):,} PSMs into {len(ions):,} peptide ions")
    return ions
