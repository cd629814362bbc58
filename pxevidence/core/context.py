from dataclasses import dataclass

from pxevidence.core.common import (
    DEFAULT_CONTAMINANT_TAG,
    DEFAULT_DECOY_TAG,
    MASS_BIN_AMPLITUDE,
    MASS_BIN_SIZE,
    MASS_BIN_WINDOW,
    UNIMOD_TOLERANCE,
    UNMODIFIED_MASS_THRESHOLD,
)


@dataclass(frozen=True)
class EvidenceContext:
    """
    Settings of one aggregation run, passed explicitly into every stage.

    Attributes:
        decoy_tag: Protein name prefix that marks decoy entries
        contaminant_tag: Protein name prefix that marks contaminant entries
        include_decoys: Keep decoy proteins in the protein collection
        unimod_tolerance: Absolute tolerance (Da) for reference mass matching
        mass_bin_size: Width (Da) of each modification mass bin
        mass_bin_window: Half-window of a bin as a fraction of its width
        mass_bin_amplitude: Bins cover -amplitude..+amplitude (Da)
        unmodified_mass_threshold: |mass diff| up to this counts as unmodified
    """

    decoy_tag: str = DEFAULT_DECOY_TAG
    contaminant_tag: str = DEFAULT_CONTAMINANT_TAG
    include_decoys: bool = False
    unimod_tolerance: float = UNIMOD_TOLERANCE
    mass_bin_size: float = MASS_BIN_SIZE
    mass_bin_window: float = MASS_BIN_WINDOW
    mass_bin_amplitude: float = MASS_BIN_AMPLITUDE
    unmodified_mass_threshold: float = UNMODIFIED_MASS_THRESHOLD

    def __post_init__(self):
        if self.mass_bin_size <= 0:
            raise ValueError("mass_bin_size must be positive")
        if self.mass_bin_amplitude < 0:
            raise ValueError("mass_bin_amplitude must not be negative")
        if self.unimod_tolerance < 0:
            raise ValueError("unimod_tolerance must not be negative")

    @property
    def mass_bin_half_width(self) -> float:
        return self.mass_bin_window * self.mass_bin_size
