"""Peptide aggregation: ions grouped by stripped sequence."""

import logging
from collections import OrderedDict
from typing import List, Sequence

from pxevidence.core.common import is_unmodified_mass
from pxevidence.core.context import EvidenceContext
from pxevidence.core.models import IonEvidence, PeptideEvidence, PSMEvidence
from pxevidence.utils.intensity_utils import calculate_apex_intensity

logger = logging.getLogger(__name__)


def aggregate_peptides(
    ions: Sequence[IonEvidence],
    psms: Sequence[PSMEvidence],
    context: EvidenceContext,
) -> List[PeptideEvidence]:
    """
    Build the peptide evidence collection.

    Charge and modification state are ignored: every ion of a stripped sequence
    contributes. The spectral count is the number of distinct PSM records that
    support any of those ions, the intensity is their apex.
    """
    peptides = OrderedDict()
    ion_forms = {}
    for ion in ions:
        peptide = peptides.get(ion.sequence)
        if peptide is None:
            peptide = PeptideEvidence(sequence=ion.sequence)
            peptides[ion.sequence] = peptide
        peptide.charge_states.add(ion.charge_state)
        peptide.mapped_proteins.update(ion.mapped_proteins)
        if ion.probability > peptide.probability:
            peptide.probability = ion.probability
        ion_forms[ion.ion_form] = ion.sequence

    supporting = {sequence: [] for sequence in peptides}
    for psm in psms:
        sequence = ion_forms.get(psm.ion_form)
        if sequence is not None:
            supporting[sequence].append(psm)

    threshold = context.unmodified_mass_threshold
    for sequence, peptide in peptides.items():
        members = supporting[sequence]
        peptide.spc = len(members)
        peptide.intensity = calculate_apex_intensity(p.intensity for p in members)
        for psm in members:
            if is_unmodified_mass(psm.massdiff, threshold):
                peptide.unmodified_observations += 1
            else:
                peptide.modified_observations += 1

    result = sorted(peptides.values(), key=lambda p: p.sequence)
    logger.info(f"Aggregated {len(ions):,} peptide ions into {len(result):,} peptides")
    return result
