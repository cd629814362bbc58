"""Arrow schemas of the exported evidence collections."""

import pyarrow as pa


def _field(name: str, dtype: pa.DataType, description: str, nullable: bool = True) -> pa.Field:
    return pa.field(name, dtype, nullable=nullable, metadata={"description": description})


PSM_FIELDS = [
    _field("spectrum", pa.string(), "spectrum identifier", nullable=False),
    _field("source", pa.string(), "spectrum source (run) name"),
    _field("spectrum_file", pa.string(), "spectrum file name"),
    _field("scan", pa.int32(), "scan number"),
    _field("peptide", pa.string(), "stripped peptide sequence", nullable=False),
    _field("modified_peptide", pa.string(), "peptide sequence with modifications"),
    _field("ion_form", pa.string(), "peptide ion key sequence#charge#mass", nullable=False),
    _field("prev_aa", pa.string(), "residue preceding the peptide"),
    _field("next_aa", pa.string(), "residue following the peptide"),
    _field("assumed_charge", pa.int32(), "precursor charge"),
    _field("hit_rank", pa.int32(), "rank of the match for its spectrum"),
    _field("retention_time", pa.float64(), "retention time in seconds"),
    _field("observed_mz", pa.float64(), "observed precursor m/z, null at charge 0"),
    _field("calibrated_observed_mz", pa.float64(), "calibrated observed m/z, null at charge 0"),
    _field("calculated_mz", pa.float64(), "theoretical peptide m/z, null at charge 0"),
    _field("precursor_neutral_mass", pa.float64(), "calibrated observed neutral mass"),
    _field("uncalibrated_precursor_neutral_mass", pa.float64(), "observed neutral mass"),
    _field("calc_neutral_pep_mass", pa.float64(), "theoretical peptide neutral mass"),
    _field("massdiff", pa.float64(), "observed minus theoretical neutral mass"),
    _field("probability", pa.float64(), "PSM probability"),
    _field("expectation", pa.float64(), "expectation value"),
    _field("hyperscore", pa.float64(), "search engine hyperscore"),
    _field("nextscore", pa.float64(), "search engine next best score"),
    _field("xcorr", pa.float64(), "cross correlation score"),
    _field("delta_cn", pa.float64(), "delta cn score"),
    _field("discriminant_value", pa.float64(), "discriminant value of the validation model"),
    _field("intensity", pa.float64(), "precursor intensity"),
    _field("ion_mobility", pa.float64(), "ion mobility"),
    _field("compensation_voltage", pa.float64(), "compensation voltage"),
    _field("number_of_enzymatic_termini", pa.int32(), "number of enzymatic termini"),
    _field("number_of_missed_cleavages", pa.int32(), "number of missed cleavages"),
    _field("protein", pa.string(), "primary protein name"),
    _field("protein_id", pa.string(), "primary protein accession"),
    _field("entry_name", pa.string(), "primary protein entry name"),
    _field("gene_name", pa.string(), "primary protein gene name"),
    _field("protein_description", pa.string(), "primary protein description"),
    _field("mapped_proteins", pa.list_(pa.string()), "all proteins the peptide maps to, sorted"),
    _field("mapped_genes", pa.list_(pa.string()), "genes of the mapped proteins, sorted"),
    _field("assigned_modifications", pa.list_(pa.string()), "labels of the assigned mass shifts, sorted"),
    _field("observed_modifications", pa.list_(pa.string()), "labels of the observed mass difference, sorted"),
    _field("is_decoy", pa.bool_(), "primary protein is a decoy"),
    _field("is_unique", pa.bool_(), "ion is unique to one protein"),
    _field("is_urazor", pa.bool_(), "ion is unique or razor-assigned"),
]
PSM_SCHEMA = pa.schema(PSM_FIELDS, metadata={"description": "PSM evidence"})

ION_FIELDS = [
    _field("ion_form", pa.string(), "peptide ion key sequence#charge#mass", nullable=False),
    _field("sequence", pa.string(), "stripped peptide sequence", nullable=False),
    _field("modified_sequence", pa.string(), "peptide sequence with modifications"),
    _field("charge_state", pa.int32(), "precursor charge"),
    _field("mz", pa.float64(), "theoretical m/z, null at charge 0"),
    _field("peptide_mass", pa.float64(), "theoretical peptide neutral mass"),
    _field("precursor_neutral_mass", pa.float64(), "observed neutral mass of the first PSM"),
    _field("protein", pa.string(), "primary protein name"),
    _field("spectra", pa.list_(pa.string()), "supporting spectra, sorted"),
    _field("spectral_count", pa.int32(), "number of supporting PSM matches"),
    _field("mapped_proteins", pa.list_(pa.string()), "all proteins the ion maps to, sorted"),
    _field("probability", pa.float64(), "best PSM probability"),
    _field("expectation", pa.float64(), "expectation value of the first PSM"),
    _field("assigned_modifications", pa.list_(pa.string()), "labels of the assigned mass shifts, sorted"),
    _field("observed_modifications", pa.list_(pa.string()), "labels of the observed mass differences, sorted"),
    _field("modified_observations", pa.int32(), "PSMs outside the unmodified mass window"),
    _field("unmodified_observations", pa.int32(), "PSMs inside the unmodified mass window"),
    _field("intensity", pa.float64(), "apex PSM intensity"),
    _field("is_decoy", pa.bool_(), "primary protein is a decoy"),
    _field("is_unique", pa.bool_(), "ion is unique to one protein"),
    _field("is_urazor", pa.bool_(), "ion is unique or razor-assigned"),
]
ION_SCHEMA = pa.schema(ION_FIELDS, metadata={"description": "peptide ion evidence"})

PEPTIDE_FIELDS = [
    _field("sequence", pa.string(), "stripped peptide sequence", nullable=False),
    _field("charge_states", pa.list_(pa.int32()), "observed charge states, sorted"),
    _field("spectral_count", pa.int32(), "number of supporting PSMs"),
    _field("intensity", pa.float64(), "apex PSM intensity"),
    _field("probability", pa.float64(), "best ion probability"),
    _field("mapped_proteins", pa.list_(pa.string()), "all proteins the peptide maps to, sorted"),
    _field("modified_observations", pa.int32(), "PSMs outside the unmodified mass window"),
    _field("unmodified_observations", pa.int32(), "PSMs inside the unmodified mass window"),
]
PEPTIDE_SCHEMA = pa.schema(PEPTIDE_FIELDS, metadata={"description": "peptide evidence"})

PROTEIN_FIELDS = [
    _field("protein_group", pa.int32(), "protein group number", nullable=False),
    _field("protein_subgroup", pa.string(), "sibling id within the group"),
    _field("protein_name", pa.string(), "protein name", nullable=False),
    _field("protein_id", pa.string(), "protein accession"),
    _field("entry_name", pa.string(), "protein entry name"),
    _field("gene_names", pa.string(), "gene names"),
    _field("description", pa.string(), "protein description"),
    _field("organism", pa.string(), "organism"),
    _field("protein_existence", pa.string(), "protein existence level"),
    _field("length", pa.int32(), "protein length"),
    _field("coverage", pa.float64(), "percent sequence coverage"),
    _field("probability", pa.float64(), "protein probability"),
    _field("top_pep_prob", pa.float64(), "best peptide probability"),
    _field("is_decoy", pa.bool_(), "protein is a decoy"),
    _field("is_contaminant", pa.bool_(), "protein is a contaminant"),
    _field("unique_stripped_peptides", pa.int32(), "number of unique stripped peptides"),
    _field("indistinguishable_proteins", pa.list_(pa.string()), "indistinguishable proteins, sorted"),
    _field("total_peptide_ions", pa.list_(pa.string()), "keys of all peptide ions, sorted"),
    _field("unique_peptide_ions", pa.list_(pa.string()), "keys of unique peptide ions, sorted"),
    _field("urazor_peptide_ions", pa.list_(pa.string()), "keys of unique and razor peptide ions, sorted"),
    _field("total_spectral_count", pa.int32(), "spectral count of all peptide ions"),
    _field("unique_spectral_count", pa.int32(), "spectral count of unique peptide ions"),
    _field("urazor_spectral_count", pa.int32(), "spectral count of unique and razor peptide ions"),
    _field("total_intensity", pa.float64(), "summed intensity of all peptide ions"),
    _field("unique_intensity", pa.float64(), "summed intensity of unique peptide ions"),
    _field("urazor_intensity", pa.float64(), "summed intensity of unique and razor peptide ions"),
    _field("urazor_modified_observations", pa.int32(), "modified observations of unique and razor ions"),
    _field("urazor_unmodified_observations", pa.int32(), "unmodified observations of unique and razor ions"),
    _field("urazor_assigned_modifications", pa.list_(pa.string()), "assigned labels of unique and razor ions, sorted"),
    _field("urazor_observed_modifications", pa.list_(pa.string()), "observed labels of unique and razor ions, sorted"),
]
PROTEIN_SCHEMA = pa.schema(PROTEIN_FIELDS, metadata={"description": "protein evidence"})

MODIFICATION_FIELDS = [
    _field("lower_mass", pa.float64(), "lower bin bound, exclusive", nullable=False),
    _field("higher_mass", pa.float64(), "upper bin bound, inclusive", nullable=False),
    _field("mass_center", pa.float64(), "nominal bin centre", nullable=False),
    _field("average_mass", pa.float64(), "average observed mass difference"),
    _field("corrected_mass", pa.float64(), "average mass corrected by the zero bin deviation"),
    _field("assigned_psms", pa.int32(), "PSMs with an assigned mass shift in the bin"),
    _field("observed_psms", pa.int32(), "PSMs with their mass difference in the bin"),
    _field("assigned_spectra", pa.list_(pa.string()), "spectra with an assigned mass shift in the bin, sorted"),
    _field("observed_spectra", pa.list_(pa.string()), "spectra with their mass difference in the bin, sorted"),
]
MODIFICATION_SCHEMA = pa.schema(MODIFICATION_FIELDS, metadata={"description": "mass difference bins"})
