"""
Pytest configuration and shared fixtures for the test suite.
"""

import json
import logging

import pytest

from fasta_organism_filter.config import SystemConfig, FilterConfig, LoggingConfig, set_config
from fasta_organism_filter.errors import set_error_handler


SAMPLE_FASTA = """>sp|P04637|P53_HUMAN Cellular tumor antigen p53 OS=Homo sapiens OX=9606 GN=TP53 PE=1 SV=4
MEEPQSDPSVEPPLSQETFSDLWKLLPENNVLSPLPSQAMDDLMLSPDDIEQWFTEDPGPDEAPRMPEAAPPVAPAPAAPTPAAPAPAPSWPLSSSVPSQKTYQGSYGFRLGFLHSGTAKSVTCTYSPALNKMFCQLAKTCPVQLWVDSTPPPGTRVRAMAIYKQSQHMTEVVRRCPHHERCSDSDGLAPPQHLIRVEGNLRVEYLDDRNTFRHSVVVPYEPPEVGSDCTTIHYNYMCNSSCMGGMNRRPILTIITLEDSSGNLLGRNSFEVRVCACPGRDRRTEEENLRKKGEPHHELPPGSTKRALPNNT
>XP_001 tumor protein p53 [Mus musculus]
MTAMEESQSDISLELPLSQETFSGLWKLLPPEDILPSPHCMDDLLLPQDVEEFFEGPSEALRVSGAPAAQDPVTETPGPVAPAPATPWPLSSFVPSQKTYQGNYGFHLGFLQSGTAKSVMCTYSPPLNKLFCQLAKTCPVQLWVSATPPAGSRVRAMAIYKKSQHMTEVVRRCPHHERCSDGDGLAPPQHLIRVEGNLYPEYLEDRQTFRHSVVVPYEPPEAGSEYTTIHYKYMCNSSCMGGMNRRPILTIITLEDSSGNLLGRDSFEVRVCACPGRDRRTEEENFRKKEVLCPELPPGSAKRALPTCTSASPPQKKKPLDGEYFTLKIRGRKRFEMFRELNEALELKDAHATEESGDSRAHSSYLKTKKGQSTSRHKKTMVKKVGPDSD
>NOORG_1 Uncharacterized protein
MKKLLPTAAAGLLLLAAQPAMA
"""


@pytest.fixture
def test_config():
    """Create a test configuration instance."""
    return SystemConfig(
        filter=FilterConfig(
            residues_per_line=60,
            max_description_length=7500,
            progress_interval_seconds=10.0
        ),
        logging=LoggingConfig(level="DEBUG", format="text")
    )


@pytest.fixture(autouse=True)
def setup_test_config(test_config):
    """Automatically set up test configuration for all tests."""
    set_config(test_config)
    set_error_handler(None)

    yield test_config

    set_config(None)
    set_error_handler(None)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging replaces the root handlers; put the originals back after each test."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level

    yield

    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.fixture
def temp_config_file(tmp_path):
    """Create a temporary configuration file for testing."""
    config_data = {
        "filter": {
            "residues_per_line": 80,
            "progress_interval_seconds": 1.5
        },
        "logging": {
            "level": "WARNING",
            "format": "json"
        }
    }
    config_file = tmp_path / "settings.json"
    config_file.write_text(json.dumps(config_data))
    return config_file


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Set up mock environment variables for testing."""
    env_vars = {
        "FASTA_FILTER_RESIDUES_PER_LINE": "70",
        "FASTA_FILTER_MAX_DESCRIPTION_LENGTH": "500",
        "FASTA_FILTER_PROGRESS_INTERVAL": "2.5",
        "LOG_LEVEL": "DEBUG",
        "LOG_FORMAT": "json"
    }

    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)

    return env_vars


@pytest.fixture
def sample_fasta(tmp_path):
    """FASTA file with a UniProt entry, a bracketed NCBI entry, and one without an organism."""
    fasta_file = tmp_path / "sample.fasta"
    fasta_file.write_text(SAMPLE_FASTA)
    return fasta_file


@pytest.fixture
def write_fasta(tmp_path):
    """Factory writing (name, description, sequence) records to a FASTA file."""
    def _write(records, file_name="proteins.fasta"):
        path = tmp_path / file_name
        lines = []
        for name, description, sequence in records:
            header = f">{name} {description}" if description else f">{name}"
            lines.append(header)
            lines.append(sequence)
        path.write_text("\n".join(lines) + "\n")
        return path
    return _write


@pytest.fixture
def write_list_file(tmp_path):
    """Factory writing a list file from lines."""
    def _write(lines, file_name="filters.txt"):
        path = tmp_path / file_name
        path.write_text("\n".join(lines) + "\n")
        return path
    return _write
