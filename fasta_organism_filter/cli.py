"""
Command-line interface for the FASTA Organism Filter.

This module provides the fasta-organism-filter command, which summarizes the organisms
in a FASTA file or writes a filtered copy of it.
"""

import click
import sys
from pydantic import ValidationError

from .config import SystemConfig, load_config_from_file, set_config
from .errors import ConfigurationError, FastaFilterError, create_error_context, handle_error
from .logging_config import get_warning_count, setup_logging
from .models.options import FilterOptions
from .processing.orchestrator import FastaOrganismFilter

PROGRAM_HELP = """Find the organisms in a FASTA file, or create a filtered FASTA file.

\b
Organisms are determined from each protein description:
  1. UniProt species tag OS= (taxonomy ID from OX=), e.g. OS=Homo sapiens OX=9606
  2. Otherwise the text in the last set of square brackets
  3. Otherwise (filter modes only) the entire description

\b
There are 5 processing modes:
  Mode 1: no filter option; write INPUT_OrganismSummary.txt (and, with --map,
          INPUT_ProteinOrganismMap.txt)
  Mode 2: --org FILE; keep proteins from the organisms listed in FILE
  Mode 3: --organism NAME; keep proteins from one organism (* is a wildcard)
  Mode 4: --prot FILE; keep the listed proteins (--desc also searches descriptions)
  Mode 5: --tax FILE; keep proteins whose OX= taxonomy ID is listed in FILE

\b
List files have one entry per line. Lines starting with 'RegEx:' are regular
expressions, e.g. 'RegEx:Cytochrome.+'. In organism list files, lines starting
with 'TaxId:' are taxonomy IDs matched against OX= tags.

Output files are created in the directory of INPUT_FILE unless -o is given.
"""


@click.command(help=PROGRAM_HELP)
@click.argument('input_file', type=click.Path(dir_okay=False))
@click.option('--output-dir', '-o', 'output_dir', type=click.Path(file_okay=False),
              help='Output directory (default: directory of the input file)')
@click.option('--map', 'create_map_file', is_flag=True,
              help='Create the protein to organism map file (summary mode)')
@click.option('--organism-list', '--org', 'organism_list', type=click.Path(dir_okay=False),
              help='File with organism names, RegEx: patterns, or TaxId: values to filter on')
@click.option('--organism', 'organism_name',
              help='Single organism name to filter on; * is a wildcard')
@click.option('--protein-list', '--prot', 'protein_list', type=click.Path(dir_okay=False),
              help='File with protein names or RegEx: patterns to filter on')
@click.option('--search-descriptions', '--desc', 'search_descriptions', is_flag=True,
              help='With --prot, also search protein descriptions')
@click.option('--taxonomy-list', '--tax', 'taxonomy_list', type=click.Path(dir_okay=False),
              help='File with taxonomy IDs to filter on')
@click.option('--verbose', '-v', is_flag=True,
              help='Log every match and write a _MatchInfo.txt file')
@click.option('--config', '-c', type=click.Path(exists=True, dir_okay=False),
              help='Configuration file path (JSON)')
def cli(input_file, output_dir, create_map_file, organism_list, organism_name,
        protein_list, search_descriptions, taxonomy_list, verbose, config):
    """Entry point for one filtering run."""
    if config:
        system_config = load_config_from_file(config)
    else:
        system_config = SystemConfig.from_env()
        set_config(system_config)

    if verbose:
        system_config.logging.level = "DEBUG"

    setup_logging(system_config.logging)

    try:
        options = FilterOptions(
            input_file_path=input_file,
            output_directory_path=output_dir,
            create_map_file=create_map_file,
            organism_name=organism_name,
            organism_list_file=organism_list,
            protein_list_file=protein_list,
            search_protein_descriptions=search_descriptions,
            taxonomy_id_list_file=taxonomy_list,
            verbose=verbose
        )
    except ValidationError as e:
        messages = "; ".join(error['msg'] for error in e.errors())
        handle_error(
            ConfigurationError(f"Invalid options: {messages}", original_exception=e),
            create_error_context("parse_options")
        )
        sys.exit(1)

    organism_filter = FastaOrganismFilter(options, system_config)
    organism_filter.show_processing_options()

    try:
        report = organism_filter.start_processing()
    except FastaFilterError as e:
        handle_error(e, e.context)
        sys.exit(1)
    except Exception as e:
        handle_error(e, create_error_context("start_processing", file_path=input_file))
        sys.exit(1)

    click.echo(f"\nProcessed {report.proteins_read:,} proteins ({report.mode})")
    if report.mode == "organism summary":
        click.echo(f"Organisms found: {report.organisms_found:,}")
    else:
        click.echo(f"Proteins written: {report.proteins_written:,}")
    for output_file in report.output_files:
        click.echo(f"  {output_file}")

    warnings = get_warning_count()
    if warnings:
        click.echo(f"Completed with {warnings:,} warning{'' if warnings == 1 else 's'}")


def main():
    """Main entry point for the CLI."""
    try:
        cli()
    except KeyboardInterrupt:
        click.echo("\nOperation cancelled by user.", err=True)
        sys.exit(1)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
