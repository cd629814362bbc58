"""
Evidence aggregation command.
"""

import logging
from pathlib import Path
from typing import Optional

import click

from pxevidence.core.common import DEFAULT_CONTAMINANT_TAG, DEFAULT_DECOY_TAG, UNIMOD_TOLERANCE
from pxevidence.core.context import EvidenceContext
from pxevidence.core.database import load_fasta_database
from pxevidence.core.frames import evidence_to_tables
from pxevidence.core.modification.unimod import load_unimod
from pxevidence.core.pipeline import run_pipeline
from pxevidence.core.reader import read_protein_table, read_psm_table
from pxevidence.utils.file_utils import check_directory, create_uuid_filename, write_parquet
from pxevidence.utils.logger import get_logger


@click.command(
    "aggregate",
    short_help="Aggregate validated PSMs into ion, peptide and protein evidence",
)
@click.option(
    "--psm-file",
    help="Validated PSM table (tsv, csv or parquet)",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--protein-file",
    help="Protein group table, one row per protein and peptide ion (tsv, csv or parquet)",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--fasta",
    help="Protein database FASTA file with targets and decoys",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--unimod",
    help="UniMod reference table (unimod.obo or tsv/csv with accession, title, mono_mass, description); "
    "defaults to the UniMod entries bundled with OpenMS",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--output-folder",
    help="Output folder",
    required=True,
    type=click.Path(file_okay=False, path_type=Path),
)
@click.option(
    "--output-prefix",
    help="Output file prefix",
)
@click.option(
    "--decoy-tag",
    help="Protein name prefix of decoy entries",
    default=DEFAULT_DECOY_TAG,
    show_default=True,
)
@click.option(
    "--contaminant-tag",
    help="Protein name prefix of contaminant entries",
    default=DEFAULT_CONTAMINANT_TAG,
    show_default=True,
)
@click.option(
    "--include-decoys",
    help="Keep decoy proteins in the protein evidence",
    is_flag=True,
)
@click.option(
    "--unimod-tolerance",
    help="Absolute mass tolerance in Da for UniMod matching",
    default=UNIMOD_TOLERANCE,
    show_default=True,
    type=float,
)
@click.option(
    "--populated-bins-only",
    help="Only write mass bins that hold at least one PSM",
    is_flag=True,
)
@click.option("--verbose", help="Enable verbose logging", is_flag=True)
def aggregate_evidence_cmd(
    psm_file: Path,
    protein_file: Path,
    fasta: Path,
    unimod: Optional[Path],
    output_folder: Path,
    output_prefix: Optional[str],
    decoy_tag: str,
    contaminant_tag: str,
    include_decoys: bool = False,
    unimod_tolerance: float = UNIMOD_TOLERANCE,
    populated_bins_only: bool = False,
    verbose: bool = False,
):
    """
    Aggregate validated PSMs into PSM, ion, peptide, protein and
    modification evidence, writing one parquet file per collection.

    Example:
        pxevidencec aggregate \\
            --psm-file psm.tsv \\
            --protein-file protein.tsv \\
            --fasta db.fasta \\
            --unimod unimod.obo \\
            --output-folder ./output
    """
    logger = get_logger("pxevidence.commands.aggregate")
    if verbose:
        logger.setLevel(logging.DEBUG)
        logging.getLogger("pxevidence").setLevel(logging.DEBUG)
        logger.debug("Verbose logging enabled")

    try:
        output_folder = check_directory(output_folder)
        logger.info(f"Using output directory: {output_folder}")

        context = EvidenceContext(
            decoy_tag=decoy_tag,
            contaminant_tag=contaminant_tag,
            include_decoys=include_decoys,
            unimod_tolerance=unimod_tolerance,
        )

        database = load_fasta_database(fasta, decoy_tag, contaminant_tag)
        reference = load_unimod(unimod)
        psm_identifications = read_psm_table(psm_file)
        protein_identifications = read_protein_table(protein_file)

        evidence = run_pipeline(
            psm_identifications, protein_identifications, database, reference, context
        )

        prefix = output_prefix or "evidence"
        tables = evidence_to_tables(evidence, populated_bins_only=populated_bins_only)
        for name, table in tables.items():
            output_path = output_folder / create_uuid_filename(prefix, f".{name}.parquet")
            write_parquet(table, output_path)
            logger.info(f"{name} evidence ({table.num_rows:,} rows) saved to: {output_path}")

    except Exception as e:
        logger.error(f"Error in evidence aggregation: {str(e)}", exc_info=True)
        raise click.ClickException(f"Error: {str(e)}\nCheck the logs for more details.")
