"""Shared constants, key builders and input column maps."""

from typing import Optional

from pyopenms.Constants import PROTON_MASS_U

# Ion-form keys are "sequence#charge#mass" with the mass at 4 decimals
ION_FORM_SEPARATOR = "#"
ION_FORM_MASS_DECIMALS = 4

DEFAULT_DECOY_TAG = "rev_"
DEFAULT_CONTAMINANT_TAG = "contam_"

# Mass differences inside +/- this window count as unmodified observations
UNMODIFIED_MASS_THRESHOLD = 0.99

# UniMod matching, absolute tolerance in Da
UNIMOD_TOLERANCE = 0.01
UNKNOWN_MODIFICATION = "Unknown"
SUBSTITUTION_TAG = "substitution"

# Mass bins: width, half-window as a fraction of the width, and amplitude in Da
MASS_BIN_SIZE = 0.1
MASS_BIN_WINDOW = 0.5
MASS_BIN_AMPLITUDE = 500.0
MASS_DECIMALS = 4

LIST_SEPARATOR = ";"


def ion_form_key(
    sequence: str, modified_sequence: Optional[str], charge: int, mass: float
) -> str:
    """
    Build the ion-form key of a peptide ion.

    The modified sequence is used when present, otherwise the stripped sequence.
    The result only depends on its arguments.
    """
    peptide = modified_sequence if modified_sequence else sequence
    return f"{peptide}{ION_FORM_SEPARATOR}{int(charge)}{ION_FORM_SEPARATOR}{mass:.{ION_FORM_MASS_DECIMALS}f}"


def calculate_mz(neutral_mass: float, charge: int) -> Optional[float]:
    """Return the m/z of a neutral mass at a charge, or None when the charge is zero."""
    if not charge:
        return None
    return (neutral_mass + charge * PROTON_MASS_U) / charge


def has_tag(protein_name: Optional[str], tag: str) -> bool:
    if not protein_name or not tag:
        return False
    return protein_name.startswith(tag)


def is_decoy_name(protein_name: Optional[str], decoy_tag: str) -> bool:
    """A protein is a decoy when its name starts with the decoy tag."""
    return has_tag(protein_name, decoy_tag)


def is_unmodified_mass(massdiff: float, threshold: float = UNMODIFIED_MASS_THRESHOLD) -> bool:
    return -threshold <= massdiff <= threshold


# Input table columns, snake_case names of the tabular interchange format
PSM_REQUIRED_COLUMNS = [
    "spectrum",
    "peptide",
    "protein",
    "assumed_charge",
    "calc_neutral_pep_mass",
]

PSM_LIST_COLUMNS = ["alternative_proteins"]
PSM_FLOAT_LIST_COLUMNS = ["assigned_mass_diffs"]

PSM_COLUMN_MAP = {
    "Spectrum": "spectrum",
    "Spectrum File": "spectrum_file",
    "Peptide": "peptide",
    "Modified Peptide": "modified_peptide",
    "Protein": "protein",
    "Mapped Proteins": "alternative_proteins",
    "Charge": "assumed_charge",
    "Retention": "retention_time",
    "Calibrated Observed Mass": "precursor_neutral_mass",
    "Observed Mass": "uncalibrated_precursor_neutral_mass",
    "Calculated Peptide Mass": "calc_neutral_pep_mass",
    "Delta Mass": "massdiff",
    "Expectation": "expectation",
    "Hyperscore": "hyperscore",
    "Nextscore": "nextscore",
    "PeptideProphet Probability": "probability",
    "Number of Enzymatic Termini": "number_of_enzymatic_termini",
    "Number of Missed Cleavages": "number_of_missed_cleavages",
    "Intensity": "intensity",
    "Ion Mobility": "ion_mobility",
    "Compensation Voltage": "compensation_voltage",
}

PROTEIN_REQUIRED_COLUMNS = [
    "group_number",
    "protein_name",
    "peptide_sequence",
    "charge",
    "calc_neutral_pep_mass",
]

PROTEIN_LIST_COLUMNS = [
    "indistinguishable_proteins",
    "unique_stripped_peptides",
    "parent_proteins",
]

UNIMOD_TABLE_COLUMNS = ["accession", "title", "mono_mass", "description"]
