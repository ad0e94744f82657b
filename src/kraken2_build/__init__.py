__version__ = "0.1.0"

PROG = "kraken2-build"
