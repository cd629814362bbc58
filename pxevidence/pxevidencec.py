"""
Commandline interface for the pxevidence package: aggregates validated
peptide-spectrum matches into ion, peptide, protein and modification evidence.
"""

import logging

import click

from pxevidence import __version__ as __version__

from pxevidence.commands.aggregate.evidence import aggregate_evidence_cmd
from pxevidence.utils.logger import DEFAULT_DATEFMT, DEFAULT_FORMAT

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


@click.version_option(
    version=__version__, package_name="pxevidence", message="%(package)s %(version)s"
)
@click.group(context_settings=CONTEXT_SETTINGS)
def cli() -> None:
    """
    pxevidence - post-search evidence aggregation for mass spectrometry proteomics
    """
    logging.basicConfig(
        level=logging.INFO,
        datefmt=DEFAULT_DATEFMT,
        format=DEFAULT_FORMAT,
    )


cli.add_command(aggregate_evidence_cmd, name="aggregate")


def pxevidence_main() -> None:
    """
    Main function to run the pxevidence command line interface
    :return: none
    """
    cli()


if __name__ == "__main__":
    pxevidence_main()
