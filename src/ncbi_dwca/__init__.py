"""Convert the NCBI taxonomy dump into a Darwin Core archive."""

__version__ = "0.1.0"
