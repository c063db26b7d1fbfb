"""
Filter orchestration: one forward pass over a FASTA file per run.

For each protein entry the orchestrator extracts organism and taxonomy candidates,
asks the match engine whether the entry should be kept, and writes kept entries to
the filtered FASTA file. In summary mode every entry is tallied by organism instead.
"""

import logging
import time
from contextlib import ExitStack
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, TextIO

from ..config import SystemConfig, get_config
from ..errors import (
    EmptyFilterFileError,
    OutputDirectoryError,
    create_error_context,
)
from ..fasta_io import FastaReader, fasta_base_name, write_fasta_entry
from ..filters.loaders import (
    ListFileMode,
    build_from_list_file,
    build_from_single_name,
    build_from_taxonomy_list_file,
)
from ..filters.matching import MatchOutcome, is_exact_or_regex_match, is_taxonomy_match
from ..filters.specification import (
    ByOneOrganismName,
    ByOrganismNames,
    ByProteinNames,
    ByTaxonomyIds,
    FilterSpecification,
    NameCriteria,
    NoFilter,
    output_suffix_of,
)
from ..logging_config import log_filter_progress, log_performance_metrics
from ..models.entities import ProteinEntry
from ..models.options import FilterOptions, SelectionMode
from ..parsing.description import (
    extract_bracketed_organism,
    extract_organism,
    extract_species_tag,
    extract_taxonomy_id,
)
from .summary import MAP_HEADER, OrganismSummary

logger = logging.getLogger(__name__)

MATCH_INFO_HEADER = ("Protein", "FilterMatch", "RegEx")


@dataclass
class ProcessingReport:
    """Outcome of one filtering or summary run."""
    mode: str
    input_file: str
    proteins_read: int = 0
    proteins_written: int = 0
    organisms_found: int = 0
    entries_without_organism: int = 0
    output_files: List[str] = field(default_factory=list)
    duration_seconds: float = 0.0


class MatchRecorder:
    """
    Reports filter matches.

    Every match is logged at DEBUG level. When a match info stream is supplied,
    one tab-delimited row per match is also written to it.
    """

    def __init__(self, match_info_writer: Optional[TextIO] = None):
        self.match_info_writer = match_info_writer
        self._debug_enabled = logger.isEnabledFor(logging.DEBUG)

    def record(self, protein_name: str, candidate: str, outcome: MatchOutcome) -> None:
        if self._debug_enabled:
            if outcome.is_regex_match:
                context_start = max(outcome.match_start - 5, 0)
                context_end = min(outcome.match_start + len(outcome.matched_text) + 10, len(candidate))
                logger.debug("Protein %-15s matched '%s' in '%s'",
                             protein_name, outcome.matched_text, candidate[context_start:context_end])
            else:
                logger.debug("Protein %-15s matched '%s'", protein_name, outcome.matched_text)

        if self.match_info_writer is not None:
            fields = [protein_name, outcome.matched_text]
            if outcome.is_regex_match:
                fields.append(outcome.pattern)
            self.match_info_writer.write("\t".join(fields) + "\n")

    def record_taxonomy(self, protein_name: str, taxonomy_id: int) -> None:
        if self._debug_enabled:
            logger.debug("Protein %-15s matched taxonomy ID %d", protein_name, taxonomy_id)
        if self.match_info_writer is not None:
            self.match_info_writer.write(f"{protein_name}\t{taxonomy_id}\n")


class ProgressTracker:
    """Decides when to log progress, based on elapsed wall-clock time."""

    def __init__(self, interval_seconds: float):
        self.interval_seconds = interval_seconds
        self._last_report = time.monotonic()

    def due(self) -> bool:
        now = time.monotonic()
        if now - self._last_report < self.interval_seconds:
            return False
        self._last_report = now
        return True


def _test_candidate(
    entry: ProteinEntry,
    candidate: str,
    criteria: NameCriteria,
    recorder: Optional[MatchRecorder]
) -> bool:
    outcome = is_exact_or_regex_match(candidate, criteria)
    if outcome and recorder is not None:
        recorder.record(entry.name, candidate, outcome)
    return outcome.matched


def is_organism_match(
    entry: ProteinEntry,
    criteria: NameCriteria,
    taxonomy_ids=frozenset(),
    recorder: Optional[MatchRecorder] = None
) -> bool:
    """
    Organism filter policy.

    A UniProt OS= organism is the only candidate tested when present. Otherwise the
    bracketed organism is tested, then the whole description. When taxonomy IDs are
    part of the filter, the OX= value is tested last, even after a species tag that
    did not match.
    """
    description = entry.description

    species = extract_species_tag(description)
    if species:
        if _test_candidate(entry, species, criteria, recorder):
            return True
    else:
        organism = extract_bracketed_organism(description)
        if organism and _test_candidate(entry, organism, criteria, recorder):
            return True

        if description and _test_candidate(entry, description, criteria, recorder):
            return True

    if taxonomy_ids:
        return is_taxonomy_filter_match(entry, taxonomy_ids, recorder)

    return False


def is_taxonomy_filter_match(
    entry: ProteinEntry,
    taxonomy_ids,
    recorder: Optional[MatchRecorder] = None
) -> bool:
    """Taxonomy filter policy: the OX= value must be one of the requested IDs."""
    taxonomy_id = extract_taxonomy_id(entry.description)
    if not is_taxonomy_match(taxonomy_id, taxonomy_ids):
        return False
    if recorder is not None:
        recorder.record_taxonomy(entry.name, taxonomy_id)
    return True


def is_protein_match(
    entry: ProteinEntry,
    criteria: NameCriteria,
    search_descriptions: bool = False,
    recorder: Optional[MatchRecorder] = None
) -> bool:
    """Protein filter policy: the protein name, then optionally the description."""
    if entry.name and _test_candidate(entry, entry.name, criteria, recorder):
        return True

    if search_descriptions and entry.description:
        return _test_candidate(entry, entry.description, criteria, recorder)

    return False


def should_keep(
    entry: ProteinEntry,
    specification: FilterSpecification,
    recorder: Optional[MatchRecorder] = None
) -> bool:
    """Decide whether a protein entry belongs in the filtered FASTA file."""
    if isinstance(specification, ByTaxonomyIds):
        return is_taxonomy_filter_match(entry, specification.taxonomy_ids, recorder)

    if isinstance(specification, ByProteinNames):
        return is_protein_match(entry, specification.criteria, specification.search_descriptions, recorder)

    if isinstance(specification, ByOrganismNames):
        return is_organism_match(entry, specification.criteria, specification.taxonomy_ids, recorder)

    if isinstance(specification, ByOneOrganismName):
        return is_organism_match(entry, specification.criteria, recorder=recorder)

    raise TypeError(f"No keep/drop decision for {type(specification).__name__}")


def _pluralize(count: int) -> str:
    return "" if count == 1 else "s"


class FastaOrganismFilter:
    """
    Runs one processing mode over a FASTA file, as selected by FilterOptions.

    Modes:
        1. Summarize organisms (no filter), optionally with a protein to organism map
        2. Filter by an organism list file (names, RegEx:, TaxId:)
        3. Filter by a single organism name (with * wildcards)
        4. Filter by a protein list file, optionally searching descriptions too
        5. Filter by a taxonomy ID list file
    """

    def __init__(self, options: FilterOptions, config: Optional[SystemConfig] = None):
        self.options = options
        self.config = config or get_config()

    def show_processing_options(self) -> List[str]:
        """Log the current processing options; returns the lines logged."""
        options = self.options
        lines = [f"{'Input file path:':<40} {options.input_file_path}"]

        if options.output_directory_path:
            lines.append(f"{'Output directory path:':<40} {options.output_directory_path}")

        mode = options.selection_mode
        if mode == SelectionMode.ORGANISM_NAME:
            lines.append(f"{'Organism name filter:':<40} {options.organism_name}")
        elif mode == SelectionMode.ORGANISM_LIST:
            lines.append(f"{'Organism list file:':<40} {options.organism_list_file}")
        elif mode == SelectionMode.PROTEIN_LIST:
            lines.append(f"{'Protein list file:':<40} {options.protein_list_file}")
            lines.append(f"{'Search protein descriptions:':<40} {options.search_protein_descriptions}")
        elif mode == SelectionMode.TAXONOMY_LIST:
            lines.append(f"{'Taxonomy ID list file:':<40} {options.taxonomy_id_list_file}")
        elif options.create_map_file:
            lines.append(f"{'Create protein to organism map:':<40} True")

        for line in lines:
            logger.info(line)
        return lines

    def build_specification(self) -> FilterSpecification:
        """
        Build the filter specification for the selected mode.

        Raises:
            FilterFileError: if a list file is missing, unreadable, or malformed
            EmptyFilterFileError: if a list file has no usable entries
        """
        options = self.options
        mode = options.selection_mode

        if mode == SelectionMode.ORGANISM_NAME:
            return build_from_single_name(options.organism_name)

        if mode == SelectionMode.ORGANISM_LIST:
            specification = build_from_list_file(options.organism_list_file, ListFileMode.ORGANISM_NAME)
            list_file, label = options.organism_list_file, "Organism"
        elif mode == SelectionMode.PROTEIN_LIST:
            specification = build_from_list_file(
                options.protein_list_file,
                ListFileMode.PROTEIN_NAME,
                search_descriptions=options.search_protein_descriptions
            )
            list_file, label = options.protein_list_file, "Protein"
        elif mode == SelectionMode.TAXONOMY_LIST:
            specification = build_from_taxonomy_list_file(options.taxonomy_id_list_file)
            list_file, label = options.taxonomy_id_list_file, "Taxonomy ID"
        else:
            return NoFilter()

        if specification.is_empty:
            raise EmptyFilterFileError(
                f"{label} list file is empty: {Path(list_file).resolve()}",
                context=create_error_context("build_specification", file_path=str(list_file))
            )
        return specification

    def prepare_output_directory(self) -> Path:
        """
        Resolve the output directory, creating it if needed.

        Defaults to the directory containing the input file.
        """
        source = Path(self.options.input_file_path)
        if self.options.output_directory_path:
            output_directory = Path(self.options.output_directory_path)
        else:
            output_directory = source.parent

        try:
            output_directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputDirectoryError(
                f"Error validating the output directory {output_directory}: {e}",
                context=create_error_context("write_output_directory", file_path=str(output_directory)),
                original_exception=e
            ) from e

        if output_directory.resolve() != source.parent.resolve():
            logger.info("Output directory: %s", output_directory.resolve())

        return output_directory

    def start_processing(self) -> ProcessingReport:
        """
        Process the input file according to the options.

        Raises:
            FastaFilterError: for configuration problems (missing input, bad list file,
                empty filter, unwritable output directory)
        """
        source = Path(self.options.input_file_path)
        with FastaReader(source, self.config.filter.max_description_length) as reader:
            specification = self.build_specification()
            output_directory = self.prepare_output_directory()

            if isinstance(specification, NoFilter):
                return self.find_organisms(reader, output_directory)
            return self.filter_fasta(reader, specification, output_directory)

    def filter_fasta(
        self,
        reader: FastaReader,
        specification: FilterSpecification,
        output_directory: Path
    ) -> ProcessingReport:
        """Write the proteins that satisfy the specification to a new FASTA file."""
        filter_config = self.config.filter
        start_time = time.time()

        suffix = output_suffix_of(specification) or filter_config.default_output_suffix
        base_name = fasta_base_name(reader.path)
        filtered_fasta = output_directory / f"{base_name}{suffix}.fasta"
        report = ProcessingReport(mode=specification.description, input_file=str(reader.path))

        logger.info("Parsing %s", reader.path.name)
        logger.info("Filtering by %s", specification.description)

        with ExitStack() as stack:
            match_info_writer = None
            if self.options.verbose:
                match_info_file = output_directory / f"{base_name}{suffix}_MatchInfo.txt"
                match_info_writer = stack.enter_context(
                    open(match_info_file, 'w', encoding='utf-8', newline='\n'))
                match_info_writer.write("\t".join(MATCH_INFO_HEADER) + "\n")
                report.output_files.append(str(match_info_file))

            logger.info("Creating the filtered FASTA file: %s", filtered_fasta)
            writer = stack.enter_context(open(filtered_fasta, 'w', encoding='utf-8', newline='\n'))
            report.output_files.insert(0, str(filtered_fasta))

            recorder = MatchRecorder(match_info_writer)
            progress = ProgressTracker(filter_config.progress_interval_seconds)

            for entry in reader:
                report.proteins_read += 1

                if should_keep(entry, specification, recorder):
                    write_fasta_entry(writer, entry, filter_config.residues_per_line,
                                      filter_config.max_description_length)
                    report.proteins_written += 1

                if progress.due():
                    log_filter_progress(logger, reader.percent_processed(), report.proteins_written)

        report.duration_seconds = time.time() - start_time
        logger.info("Processing complete: wrote %s / %s protein%s to %s",
                    f"{report.proteins_written:,}", f"{report.proteins_read:,}",
                    _pluralize(report.proteins_read), filtered_fasta.name)
        log_performance_metrics(logger, "filter_fasta", report.duration_seconds,
                                proteins_read=report.proteins_read,
                                proteins_written=report.proteins_written)
        return report

    def find_organisms(self, reader: FastaReader, output_directory: Path) -> ProcessingReport:
        """Tally organisms and write the organism summary (and optional map) file."""
        filter_config = self.config.filter
        start_time = time.time()

        base_name = fasta_base_name(reader.path)
        report = ProcessingReport(mode="organism summary", input_file=str(reader.path))
        summary = OrganismSummary()

        logger.info("Parsing %s", reader.path.name)
        logger.info("Searching for organism names")

        with ExitStack() as stack:
            map_writer = None
            if self.options.create_map_file:
                map_file = output_directory / f"{base_name}_ProteinOrganismMap.txt"
                logger.info("Creating the protein to organism map file: %s", map_file)
                map_writer = stack.enter_context(open(map_file, 'w', encoding='utf-8', newline='\n'))
                map_writer.write("\t".join(MAP_HEADER) + "\n")
                report.output_files.append(str(map_file))

            progress = ProgressTracker(filter_config.progress_interval_seconds)

            for entry in reader:
                report.proteins_read += 1
                result = extract_organism(entry.description)

                if not result.organism.strip():
                    logger.warning("Organism not found for %s", entry.name)
                    report.entries_without_organism += 1
                    continue

                summary.add(result.organism, result.taxonomy_id)

                if map_writer is not None:
                    map_writer.write(f"{entry.name}\t{result.organism}\t{result.taxonomy_id}\n")

                if progress.due():
                    log_filter_progress(logger, reader.percent_processed())

        summary_file = output_directory / f"{base_name}_OrganismSummary.txt"
        logger.info("Creating the Organism Summary file: %s", summary_file)
        report.organisms_found = summary.write(summary_file)
        report.output_files.insert(0, str(summary_file))

        report.duration_seconds = time.time() - start_time
        logger.info("Processing complete: found %d organism%s",
                    report.organisms_found, _pluralize(report.organisms_found))
        log_performance_metrics(logger, "find_organisms", report.duration_seconds,
                                proteins_read=report.proteins_read,
                                organisms_found=report.organisms_found)
        return report
