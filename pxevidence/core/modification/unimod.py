"""
Assignment of UniMod identities to PSM mass shifts.

Per-residue assigned mass diffs become "assigned" modification labels and the
whole-peptide mass difference becomes an "observed" label. Labels have the
form ``"<mono mass>:<title> (<description>)"``.
"""

import bisect
import dataclasses
import logging
import re
from collections import Counter
from pathlib import Path
from typing import List, Optional, Sequence, Union

import pandas as pd
from pyopenms import ModificationsDB

from pxevidence.core.common import (
    SUBSTITUTION_TAG,
    UNIMOD_TABLE_COLUMNS,
    UNKNOWN_MODIFICATION,
)
from pxevidence.core.context import EvidenceContext
from pxevidence.core.exceptions import ReferenceTableNotFoundError
from pxevidence.core.models import PSMEvidence, UniModEntry

logger = logging.getLogger(__name__)

_OBO_DEF = re.compile(r'^"(.*?)"')
_OBO_XREF = re.compile(r'^(\S+)\s+"(.*)"')


# ============================================================================
# Reference table loaders
# ============================================================================


def _obo_term_to_entry(term: dict):
    if "id" not in term or "delta_mono_mass" not in term:
        return None
    return UniModEntry(
        accession=term["id"],
        title=term.get("name", ""),
        mono_mass=float(term["delta_mono_mass"]),
        description=term.get("def", ""),
    )


def load_unimod_obo(path: Union[str, Path]) -> List[UniModEntry]:
    """
    Load the reference table from a UniMod OBO file.

    Only ``[Term]`` stanzas that carry a ``delta_mono_mass`` cross reference
    are kept; the root term and obsolete stanzas without a mass are skipped.

    Args:
        path: Path to unimod.obo

    Returns:
        UniMod entries in file order
    """
    entries = []
    term = None
    with open(path, "r", encoding="utf-8") as handle:
        for raw_line in handle:
            line = raw_line.strip()
            if line.startswith("["):
                if term is not None:
                    entry = _obo_term_to_entry(term)
                    if entry is not None:
                        entries.append(entry)
                term = {} if line == "[Term]" else None
                continue
            if term is None or ":" not in line:
                continue

            tag, value = line.split(":", 1)
            value = value.strip()
            if tag == "id":
                term["id"] = value
            elif tag == "name":
                term["name"] = value
            elif tag == "def":
                match = _OBO_DEF.match(value)
                term["def"] = match.group(1) if match else value
            elif tag == "xref":
                match = _OBO_XREF.match(value)
                if match and match.group(1) == "delta_mono_mass":
                    term["delta_mono_mass"] = match.group(2)

    if term is not None:
        entry = _obo_term_to_entry(term)
        if entry is not None:
            entries.append(entry)

    logger.info(f"Loaded {len(entries):,} UniMod entries from {path}")
    return entries


def load_unimod_table(path: Union[str, Path]) -> List[UniModEntry]:
    """Load the reference table from a TSV/CSV file with accession, title, mono_mass and description."""
    path = Path(path)
    sep = "," if path.suffix.lower() == ".csv" else "\t"
    df = pd.read_csv(path, sep=sep, dtype={"accession": str, "title": str, "description": str})
    df.columns = df.columns.str.strip()

    missing = [c for c in UNIMOD_TABLE_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns in {path}: {', '.join(missing)}")

    df = df.dropna(subset=["mono_mass"])
    df = df.fillna({"accession": "", "title": "", "description": ""})
    entries = [
        UniModEntry(
            accession=row.accession,
            title=row.title,
            mono_mass=float(row.mono_mass),
            description=row.description,
        )
        for row in df[UNIMOD_TABLE_COLUMNS].itertuples(index=False)
    ]
    logger.info(f"Loaded {len(entries):,} UniMod entries from {path}")
    return entries


def load_unimod_openms() -> List[UniModEntry]:
    """Load the UniMod entries shipped with OpenMS, one per UniMod accession."""
    mods_db = ModificationsDB()
    entries = {}
    for index in range(mods_db.getNumberOfModifications()):
        mod = mods_db.getModification(index)
        accession = mod.getUniModAccession().upper()
        # ModificationsDB holds one record per residue specificity
        if not accession or accession in entries:
            continue
        entries[accession] = UniModEntry(
            accession=accession,
            title=mod.getId(),
            mono_mass=mod.getDiffMonoMass(),
            description=mod.getFullName(),
        )
    logger.info(f"Loaded {len(entries):,} UniMod entries from the OpenMS modification database")
    return list(entries.values())


def load_unimod(path: Optional[Union[str, Path]] = None) -> List[UniModEntry]:
    """
    Load the reference table, choosing the reader from the file extension.

    Without a path the UniMod entries bundled with OpenMS are used.
    """
    if path is None:
        return load_unimod_openms()
    if str(path).lower().endswith(".obo"):
        return load_unimod_obo(path)
    return load_unimod_table(path)


# ============================================================================
# Mass matching
# ============================================================================


class UniModIndex:
    """Reference entries sorted by monoisotopic mass for tolerance lookups."""

    def __init__(self, entries: Sequence[UniModEntry], tolerance: float):
        self.entries = sorted(entries, key=lambda e: (e.mono_mass, e.title, e.accession))
        self.masses = [e.mono_mass for e in self.entries]
        self.tolerance = tolerance

    def match(self, mass: float) -> List[UniModEntry]:
        """Entries whose mass window [mono - tol, mono + tol] contains the mass."""
        tol = self.tolerance
        # widen by one position on each side, containment below is the exact test
        lo = max(bisect.bisect_left(self.masses, mass - tol) - 1, 0)
        hi = min(bisect.bisect_right(self.masses, mass + tol) + 1, len(self.entries))
        return [
            entry
            for entry in self.entries[lo:hi]
            if entry.mono_mass - tol <= mass <= entry.mono_mass + tol
        ]


def is_substitution(entry: UniModEntry) -> bool:
    return SUBSTITUTION_TAG in entry.description


def label_psm(psm: PSMEvidence, index: UniModIndex) -> PSMEvidence:
    """Return a copy of the PSM carrying its assigned and observed modification labels."""
    assigned = Counter()
    for mass in psm.assigned_mass_diffs:
        if mass == 0:
            continue
        for entry in index.match(mass):
            if not is_substitution(entry):
                assigned[entry.label] += 1

    observed = Counter()
    matched = False
    for entry in index.match(psm.massdiff):
        matched = True
        if entry.label not in assigned:
            observed[entry.label] += 1

    if psm.massdiff != 0 and not matched:
        observed[UNKNOWN_MODIFICATION] += 1

    return dataclasses.replace(
        psm, assigned_modifications=assigned, observed_modifications=observed
    )


def map_mass_diff_to_unimod(
    psms: Sequence[PSMEvidence],
    unimod: Sequence[UniModEntry],
    context: EvidenceContext,
) -> List[PSMEvidence]:
    """
    Label every PSM with the UniMod entries matching its mass shifts.

    Args:
        psms: Consolidated PSM evidence
        unimod: Reference modification table
        context: Run settings (matching tolerance)

    Returns:
        Labelled copies of the PSMs, in the same order

    Raises:
        ReferenceTableNotFoundError: if the reference table is empty
    """
    if not unimod:
        raise ReferenceTableNotFoundError()

    index = UniModIndex(unimod, context.unimod_tolerance)
    labelled = [label_psm(psm, index) for psm in psms]

    unknown = sum(1 for p in labelled if UNKNOWN_MODIFICATION in p.observed_modifications)
    logger.info(
        f"Mapped mass differences of {len(labelled):,} PSMs against "
        f"{len(index.entries):,} UniMod entries ({unknown:,} unknown)"
    )
    return labelled
