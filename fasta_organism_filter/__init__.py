"""
FASTA Organism Filter - classify and filter protein FASTA files by source organism.

This package reads a FASTA file, determines the organism and taxonomy ID of each protein
from its description line (UniProt OS=/OX= tags or bracketed organism names), and either
summarizes the organisms present or writes a filtered FASTA file containing only the
proteins of interest.
"""

__version__ = "0.1.0"
__author__ = "FASTA Organism Filter Team"
