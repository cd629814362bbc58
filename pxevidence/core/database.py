"""Protein sequence database loading and FASTA header parsing."""

import logging
import re
from pathlib import Path
from typing import List, Union

from pyopenms import FASTAFile

from pxevidence.core.common import DEFAULT_CONTAMINANT_TAG, DEFAULT_DECOY_TAG, has_tag
from pxevidence.core.models import DatabaseRecord

logger = logging.getLogger(__name__)

# sp|P12345|ENTRY_HUMAN or tr|A0A024R161|A0A024R161_HUMAN
UNIPROT_IDENTIFIER = re.compile(r"^(?:sp|tr)\|([^|]+)\|(\S+)$")
ORGANISM = re.compile(r"\bOS=(.+?)(?=\s+[A-Z]{2}=|$)")
GENE_NAME = re.compile(r"\bGN=(\S+)")
PROTEIN_EXISTENCE = re.compile(r"\bPE=(\d)")
# description runs until the first KEY= field
DESCRIPTION = re.compile(r"^(.*?)(?=\s+[A-Z]{2}=|$)")


def parse_fasta_header(
    identifier: str,
    description: str = "",
    decoy_tag: str = DEFAULT_DECOY_TAG,
    contaminant_tag: str = DEFAULT_CONTAMINANT_TAG,
) -> DatabaseRecord:
    """
    Parse a FASTA header into a database record without sequence.

    The part header is the identifier as written (including any decoy or
    contaminant prefix) since that is the protein name used by the upstream
    tools. Accession and entry name are taken from UniProt identifiers once
    the prefixes are stripped; other identifiers are used as they are.

    Args:
        identifier: First token of the header, without the leading ">"
        description: Remainder of the header
        decoy_tag: Decoy protein name prefix
        contaminant_tag: Contaminant protein name prefix

    Returns:
        DatabaseRecord with the parsed header fields
    """
    identifier = identifier.lstrip(">").strip()
    description = description.strip()
    original_header = f"{identifier} {description}".strip()

    is_decoy = has_tag(identifier, decoy_tag)
    bare = identifier[len(decoy_tag):] if is_decoy else identifier
    is_contaminant = has_tag(bare, contaminant_tag)
    if is_contaminant:
        bare = bare[len(contaminant_tag):]

    accession = bare
    entry_name = ""
    match = UNIPROT_IDENTIFIER.match(bare)
    if match:
        accession, entry_name = match.group(1), match.group(2)

    protein_name = DESCRIPTION.match(description).group(1).strip()

    organism = ORGANISM.search(description)
    gene = GENE_NAME.search(description)
    existence = PROTEIN_EXISTENCE.search(description)

    return DatabaseRecord(
        original_header=original_header,
        part_header=identifier,
        id=accession,
        entry_name=entry_name,
        protein_name=protein_name,
        gene_names=gene.group(1) if gene else "",
        organism=organism.group(1).strip() if organism else "",
        description=protein_name,
        protein_existence=existence.group(1) if existence else "",
        is_decoy=is_decoy,
        is_contaminant=is_contaminant,
    )


def load_fasta_database(
    fasta_path: Union[str, Path],
    decoy_tag: str = DEFAULT_DECOY_TAG,
    contaminant_tag: str = DEFAULT_CONTAMINANT_TAG,
) -> List[DatabaseRecord]:
    """
    Load a protein FASTA file into database records.

    Args:
        fasta_path: Path to the FASTA file, targets and decoys together
        decoy_tag: Decoy protein name prefix
        contaminant_tag: Contaminant protein name prefix

    Returns:
        Database records in file order
    """
    fasta_path = Path(fasta_path)
    if not fasta_path.exists():
        raise FileNotFoundError(f"FASTA file not found: {fasta_path}")

    logger.info(f"Reading fasta file: {fasta_path}")
    entries: list = []
    FASTAFile().load(str(fasta_path), entries)

    records = []
    for entry in entries:
        record = parse_fasta_header(
            entry.identifier, entry.description, decoy_tag, contaminant_tag
        )
        record.sequence = entry.sequence
        records.append(record)

    decoys = sum(r.is_decoy for r in records)
    logger.info(f"Loaded {len(records):,} protein database records ({decoys:,} decoys)")
    return records
