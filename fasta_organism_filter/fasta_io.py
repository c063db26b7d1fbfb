"""
Streaming FASTA reading and writing.

The reader wraps Biopython's SimpleFastaParser, adds transparent gzip support, and
reports progress as the percentage of the file's bytes consumed. The writer
re-wraps residues at a fixed line length.
"""

import gzip
import io
import logging
from pathlib import Path
from typing import IO, Iterator, Optional, TextIO, Union

from Bio.SeqIO.FastaIO import SimpleFastaParser

from .errors import InputFileError, create_error_context
from .models.entities import ProteinEntry

logger = logging.getLogger(__name__)

DEFAULT_RESIDUES_PER_LINE = 60
DEFAULT_MAX_DESCRIPTION_LENGTH = 7500


def fasta_base_name(path: Union[str, Path]) -> str:
    """
    File name without the .gz suffix and the FASTA extension.

    >>> fasta_base_name("/data/uniprot_sprot.fasta.gz")
    'uniprot_sprot'
    """
    path = Path(path)
    if path.suffix.lower() == ".gz":
        path = path.with_suffix("")
    return path.stem


class FastaReader:
    """
    Sequential reader of protein entries from a .fasta or .fasta.gz file.

    Use as a context manager and iterate over it:

        with FastaReader("proteins.fasta") as reader:
            for entry in reader:
                ...
    """

    def __init__(self, path: Union[str, Path], max_description_length: Optional[int] = DEFAULT_MAX_DESCRIPTION_LENGTH):
        self.path = Path(path)
        self.max_description_length = max_description_length
        self._raw: Optional[IO[bytes]] = None
        self._handle: Optional[TextIO] = None
        self._file_size = 0

    def open(self) -> "FastaReader":
        if not self.path.is_file():
            raise InputFileError(
                f"Source file not found: {self.path}",
                context=create_error_context("open_fasta", file_path=str(self.path))
            )
        try:
            self._file_size = self.path.stat().st_size
            self._raw = open(self.path, 'rb')
            stream = gzip.GzipFile(fileobj=self._raw) if self.path.suffix.lower() == ".gz" else self._raw
            self._handle = io.TextIOWrapper(stream, encoding='utf-8', errors='replace')
        except OSError as e:
            self.close()
            raise InputFileError(
                f"Error opening the FASTA file {self.path}: {e}",
                context=create_error_context("open_fasta", file_path=str(self.path)),
                original_exception=e
            ) from e
        return self

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None
        if self._raw is not None:
            self._raw.close()
            self._raw = None

    def __enter__(self) -> "FastaReader":
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[ProteinEntry]:
        if self._handle is None:
            raise RuntimeError("FastaReader must be opened before iterating")
        try:
            for title, sequence in SimpleFastaParser(self._handle):
                yield ProteinEntry.from_header(title, sequence, self.max_description_length)
        except (OSError, EOFError) as e:
            raise InputFileError(
                f"Error reading the FASTA file {self.path}: {e}",
                context=create_error_context("read_fasta", file_path=str(self.path)),
                original_exception=e
            ) from e

    def percent_processed(self) -> float:
        """Percent of the file (compressed bytes for .gz files) read so far."""
        if self._raw is None or self._raw.closed or self._file_size == 0:
            return 0.0
        return min(100.0, self._raw.tell() / self._file_size * 100.0)


def format_fasta_entry(
    entry: ProteinEntry,
    residues_per_line: int = DEFAULT_RESIDUES_PER_LINE,
    max_description_length: int = DEFAULT_MAX_DESCRIPTION_LENGTH
) -> str:
    """
    Format an entry as FASTA text; the final residue line may be shorter.

    The header line is written as read, except that text after the first space is
    cut to max_description_length characters.
    """
    header = entry.header_line
    space_index = header.find(" ")
    if space_index > 0 and len(header) - space_index - 1 > max_description_length:
        header = header[:space_index + 1 + max_description_length]

    lines = [f">{header}"]

    sequence = entry.sequence
    for i in range(0, len(sequence), residues_per_line):
        lines.append(sequence[i:i + residues_per_line])

    return "\n".join(lines) + "\n"


def write_fasta_entry(
    writer: TextIO,
    entry: ProteinEntry,
    residues_per_line: int = DEFAULT_RESIDUES_PER_LINE,
    max_description_length: int = DEFAULT_MAX_DESCRIPTION_LENGTH
) -> None:
    """Write one entry to an open text stream."""
    writer.write(format_fasta_entry(entry, residues_per_line, max_description_length))
