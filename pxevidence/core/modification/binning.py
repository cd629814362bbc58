"""
Mass-difference binning.

PSM mass differences are profiled in fixed-width bins over -amplitude..+amplitude
without any prior knowledge of modification identity. The average mass
difference of the bin centred on zero shows the calibration offset of the run;
every populated bin is corrected by it.
"""

import bisect
import logging
from typing import List, Optional, Sequence

from pxevidence.core.common import MASS_DECIMALS
from pxevidence.core.context import EvidenceContext
from pxevidence.core.models import MassBin, ModificationEvidence, PSMEvidence

logger = logging.getLogger(__name__)


def create_mass_bins(bin_size: float, half_width: float, amplitude: float) -> List[MassBin]:
    """Create empty bins with centres from -amplitude to +amplitude in bin_size steps."""
    n_bins = int(round(2 * amplitude / bin_size)) + 1
    bins = []
    for i in range(n_bins):
        center = -amplitude + i * bin_size
        bins.append(
            MassBin(
                lower_mass=round(center - half_width, MASS_DECIMALS),
                higher_mass=round(center + half_width, MASS_DECIMALS),
                mass_center=round(center, MASS_DECIMALS),
            )
        )
    return bins


def find_bin_index(upper_bounds: Sequence[float], bins: Sequence[MassBin], mass: float) -> Optional[int]:
    """Index of the bin whose (lower, upper] interval holds the mass, or None."""
    index = bisect.bisect_left(upper_bounds, mass)
    if index >= len(bins):
        return None
    if mass <= bins[index].lower_mass:
        return None
    return index


def correct_mass_bins(bins: Sequence[MassBin], zero_bin_deviation: float) -> None:
    """
    Set the corrected mass of every bin from its average mass.

    Only average_mass is read, so calling this again on corrected bins
    leaves them unchanged.
    """
    for mass_bin in bins:
        if mass_bin.observed_mods:
            if mass_bin.average_mass > 0:
                corrected = mass_bin.average_mass - zero_bin_deviation
            else:
                corrected = mass_bin.average_mass + zero_bin_deviation
        else:
            corrected = mass_bin.mass_center
        mass_bin.corrected_mass = round(corrected, MASS_DECIMALS)


def assemble_mass_bins(psms: Sequence[PSMEvidence], context: EvidenceContext) -> ModificationEvidence:
    """
    Distribute PSMs over the mass bins and correct the bin masses.

    A PSM joins the "observed" list of the bin holding its mass difference and
    the "assigned" list of each bin holding one of its non-zero per-residue
    mass shifts. Repeated identical shifts within one PSM count once.
    """
    bins = create_mass_bins(
        context.mass_bin_size, context.mass_bin_half_width, context.mass_bin_amplitude
    )
    upper_bounds = [b.higher_mass for b in bins]

    outside = 0
    for psm in psms:
        for mass in set(psm.assigned_mass_diffs):
            # 0 marks a position that does not map to a declared modification
            if mass == 0:
                continue
            index = find_bin_index(upper_bounds, bins, mass)
            if index is not None:
                bins[index].assigned_mods.append(psm)

        index = find_bin_index(upper_bounds, bins, psm.massdiff)
        if index is None:
            outside += 1
        else:
            bins[index].observed_mods.append(psm)

    zero_bin_deviation = 0.0
    for mass_bin in bins:
        observed = mass_bin.observed_mods
        average = sum(p.massdiff for p in observed) / len(observed) if observed else 0.0
        if mass_bin.mass_center == 0:
            zero_bin_deviation = average
        mass_bin.average_mass = round(average, MASS_DECIMALS)

    correct_mass_bins(bins, zero_bin_deviation)

    if outside:
        logger.debug(f"{outside:,} PSMs have a mass difference outside the binned range")
    logger.info(
        f"Binned {len(psms):,} PSMs into {len(bins):,} mass bins "
        f"(zero bin deviation {zero_bin_deviation:.4f} Da)"
    )
    return ModificationEvidence(mass_bins=bins, zero_bin_deviation=zero_bin_deviation)
