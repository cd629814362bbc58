"""
Records consumed and produced by the evidence pipeline.

Input records mirror what the upstream search, validation and protein
inference tools report. Evidence records are built once per run by the
aggregation stages and handed to the export layer.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from pxevidence.core.common import calculate_mz


# ============================================================================
# Input records
# ============================================================================


@dataclass
class PSMIdentification:
    """One validated peptide-spectrum match as reported upstream."""

    spectrum: str
    peptide: str
    protein: str
    assumed_charge: int
    calc_neutral_pep_mass: float
    modified_peptide: str = ""
    alternative_proteins: List[str] = field(default_factory=list)
    spectrum_file: str = ""
    scan: int = 0
    index: int = 0
    hit_rank: int = 1
    precursor_neutral_mass: float = 0.0
    uncalibrated_precursor_neutral_mass: float = 0.0
    precursor_exp_mass: float = 0.0
    massdiff: float = 0.0
    retention_time: float = 0.0
    probability: float = 0.0
    expectation: float = 0.0
    xcorr: float = 0.0
    delta_cn: float = 0.0
    delta_cn_star: float = 0.0
    sp_score: float = 0.0
    sp_rank: float = 0.0
    hyperscore: float = 0.0
    nextscore: float = 0.0
    discriminant_value: float = 0.0
    intensity: float = 0.0
    ion_mobility: float = 0.0
    compensation_voltage: float = 0.0
    number_of_enzymatic_termini: int = 0
    number_of_missed_cleavages: int = 0
    prev_aa: str = ""
    next_aa: str = ""
    # per-residue mass shifts, 0 marks a position without a mapped shift
    assigned_mass_diffs: List[float] = field(default_factory=list)


@dataclass
class PeptideIonIdentification:
    """A peptide ion listed under a protein by the protein inference step."""

    peptide_sequence: str
    charge: int
    calc_neutral_pep_mass: float
    modified_peptide: str = ""
    is_unique: bool = False
    razor: bool = False
    weight: float = 0.0
    group_weight: float = 0.0
    is_nondegenerate_evidence: bool = False
    initial_probability: float = 0.0
    parent_proteins: List[str] = field(default_factory=list)


@dataclass
class ProteinIdentification:
    """One protein entry of a protein group."""

    group_number: int
    protein_name: str
    group_sibling_id: str = ""
    probability: float = 0.0
    top_pep_prob: float = 0.0
    percent_coverage: float = 0.0
    length: int = 0
    description: str = ""
    indistinguishable_proteins: List[str] = field(default_factory=list)
    unique_stripped_peptides: List[str] = field(default_factory=list)
    peptide_ions: List[PeptideIonIdentification] = field(default_factory=list)


@dataclass
class DatabaseRecord:
    """A protein sequence database entry with its parsed header fields."""

    original_header: str
    part_header: str
    id: str = ""
    entry_name: str = ""
    protein_name: str = ""
    gene_names: str = ""
    organism: str = ""
    description: str = ""
    protein_existence: str = ""
    sequence: str = ""
    is_decoy: bool = False
    is_contaminant: bool = False


@dataclass(frozen=True)
class UniModEntry:
    accession: str
    title: str
    mono_mass: float
    description: str = ""

    @property
    def label(self) -> str:
        return f"{self.mono_mass:.4f}:{self.title} ({self.description})"


# ============================================================================
# Evidence records
# ============================================================================


@dataclass
class PSMEvidence:
    """A consolidated PSM. Only is_unique and is_urazor change after consolidation."""

    spectrum: str
    peptide: str
    protein: str
    assumed_charge: int
    calc_neutral_pep_mass: float
    ion_form: str
    modified_peptide: str = ""
    source: str = ""
    spectrum_file: str = ""
    scan: int = 0
    index: int = 0
    hit_rank: int = 1
    alternative_proteins: List[str] = field(default_factory=list)
    mapped_proteins: Set[str] = field(default_factory=set)
    mapped_genes: Set[str] = field(default_factory=set)
    protein_id: str = ""
    entry_name: str = ""
    gene_name: str = ""
    protein_description: str = ""
    precursor_neutral_mass: float = 0.0
    uncalibrated_precursor_neutral_mass: float = 0.0
    precursor_exp_mass: float = 0.0
    massdiff: float = 0.0
    retention_time: float = 0.0
    probability: float = 0.0
    expectation: float = 0.0
    xcorr: float = 0.0
    delta_cn: float = 0.0
    delta_cn_star: float = 0.0
    sp_score: float = 0.0
    sp_rank: float = 0.0
    hyperscore: float = 0.0
    nextscore: float = 0.0
    discriminant_value: float = 0.0
    intensity: float = 0.0
    ion_mobility: float = 0.0
    compensation_voltage: float = 0.0
    number_of_enzymatic_termini: int = 0
    number_of_missed_cleavages: int = 0
    prev_aa: str = ""
    next_aa: str = ""
    assigned_mass_diffs: List[float] = field(default_factory=list)
    assigned_modifications: Counter = field(default_factory=Counter)
    observed_modifications: Counter = field(default_factory=Counter)
    is_decoy: bool = False
    is_unique: bool = False
    is_urazor: bool = False

    @property
    def observed_mz(self) -> Optional[float]:
        return calculate_mz(self.uncalibrated_precursor_neutral_mass, self.assumed_charge)

    @property
    def calibrated_observed_mz(self) -> Optional[float]:
        return calculate_mz(self.precursor_neutral_mass, self.assumed_charge)

    @property
    def calculated_mz(self) -> Optional[float]:
        return calculate_mz(self.calc_neutral_pep_mass, self.assumed_charge)


@dataclass
class IonEvidence:
    """A distinct peptide ion (ion-form key) and the PSMs supporting it."""

    ion_form: str
    sequence: str
    charge_state: int
    peptide_mass: float
    modified_sequence: str = ""
    mz: Optional[float] = None
    precursor_neutral_mass: float = 0.0
    protein: str = ""
    spectra: Counter = field(default_factory=Counter)
    mapped_proteins: Set[str] = field(default_factory=set)
    probability: float = 0.0
    expectation: float = 0.0
    assigned_modifications: Counter = field(default_factory=Counter)
    observed_modifications: Counter = field(default_factory=Counter)
    modified_observations: int = 0
    unmodified_observations: int = 0
    intensity: float = 0.0
    weight: float = 0.0
    group_weight: float = 0.0
    is_nondegenerate_evidence: bool = False
    is_urazor: bool = False
    is_decoy: bool = False

    @property
    def spc(self) -> int:
        """Number of supporting PSM matches, counting repeated spectra."""
        return sum(self.spectra.values())


@dataclass
class PeptideEvidence:
    sequence: str
    charge_states: Set[int] = field(default_factory=set)
    spc: int = 0
    intensity: float = 0.0
    probability: float = 0.0
    mapped_proteins: Set[str] = field(default_factory=set)
    modified_observations: int = 0
    unmodified_observations: int = 0


@dataclass
class ProteinEvidence:
    """
    A protein entry with its Total, Unique and URazor (unique + razor) ion maps.

    The maps go from ion-form key to the protein's own copy of the ion record
    and always satisfy Unique <= URazor <= Total.
    """

    protein_name: str
    protein_group: int
    protein_subgroup: str = ""
    original_header: str = ""
    protein_id: str = ""
    entry_name: str = ""
    description: str = ""
    organism: str = ""
    gene_names: str = ""
    protein_existence: str = ""
    sequence: str = ""
    length: int = 0
    coverage: float = 0.0
    probability: float = 0.0
    top_pep_prob: float = 0.0
    is_decoy: bool = False
    is_contaminant: bool = False
    unique_stripped_peptides: int = 0
    indistinguishable_proteins: Set[str] = field(default_factory=set)
    supporting_spectra: Counter = field(default_factory=Counter)
    total_peptide_ions: Dict[str, IonEvidence] = field(default_factory=dict)
    unique_peptide_ions: Dict[str, IonEvidence] = field(default_factory=dict)
    urazor_peptide_ions: Dict[str, IonEvidence] = field(default_factory=dict)
    total_spc: int = 0
    unique_spc: int = 0
    urazor_spc: int = 0
    total_intensity: float = 0.0
    unique_intensity: float = 0.0
    urazor_intensity: float = 0.0
    urazor_modified_observations: int = 0
    urazor_unmodified_observations: int = 0
    urazor_assigned_modifications: Counter = field(default_factory=Counter)
    urazor_observed_modifications: Counter = field(default_factory=Counter)


@dataclass
class MassBin:
    lower_mass: float
    higher_mass: float
    mass_center: float
    average_mass: float = 0.0
    corrected_mass: float = 0.0
    assigned_mods: List[PSMEvidence] = field(default_factory=list)
    observed_mods: List[PSMEvidence] = field(default_factory=list)


@dataclass
class ModificationEvidence:
    mass_bins: List[MassBin] = field(default_factory=list)
    zero_bin_deviation: float = 0.0


@dataclass
class Evidence:
    """All collections produced by one run, each sorted by its report key."""

    psms: List[PSMEvidence] = field(default_factory=list)
    ions: List[IonEvidence] = field(default_factory=list)
    peptides: List[PeptideEvidence] = field(default_factory=list)
    proteins: List[ProteinEvidence] = field(default_factory=list)
    modifications: ModificationEvidence = field(default_factory=ModificationEvidence)
