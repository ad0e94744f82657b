from typing import Dict, Tuple

MAX_MINIMIZER_LEN = 31

DEFAULT_THREAD_CT = 1
DEFAULT_LOAD_FACTOR = 0.7
DEFAULT_BLOCK_SIZE = 16384
DEFAULT_MIN_TAXID_BITS = 0
DEFAULT_UPDATE_INTERVAL = 1000

CLASSIFY_PROGRAM = "classify"

VALID_LIBRARY_TYPES: Tuple[str, ...] = (
    "archaea",
    "bacteria",
    "plasmid",
    "viral",
    "plant",
    "protozoa",
    "fungi",
    "human",
    "nr",
    "nt",
    "UniVec",
    "UniVec_Core",
)

VALID_SPECIAL_DB_TYPES: Tuple[str, ...] = ("greengenes", "silva", "rdp")

# BuildConfiguration field -> inherited/exported variable
ENVIRONMENT_VARIABLES: Dict[str, str] = {
    "db_name": "KRAKEN2_DB_NAME",
    "thread_count": "KRAKEN2_THREAD_CT",
    "load_factor": "KRAKEN2_LOAD_FACTOR",
    "kmer_len": "KRAKEN2_KMER_LEN",
    "minimizer_len": "KRAKEN2_MINIMIZER_LEN",
    "minimizer_spaces": "KRAKEN2_MINIMIZER_SPACES",
    "is_protein": "KRAKEN2_PROTEIN_DB",
    "use_ftp": "KRAKEN2_USE_FTP",
    "skip_maps": "KRAKEN2_SKIP_MAPS",
    "masking": "KRAKEN2_MASK_LC",
    "fast_build": "KRAKEN2_FAST_BUILD",
    "block_size": "KRAKEN2_BLOCK_SIZE",
    "subblock_size": "KRAKEN2_SUBBLOCK_SIZE",
    "min_taxid_bits": "KRAKEN2_MIN_TAXID_BITS",
    "update_interval": "KRAKEN2_UPDATE_INTERVAL",
    "only_estimate": "KRAKEN2_ONLY_ESTIMATE",
}

# export only, never read back as a fallback
SEED_TEMPLATE_VARIABLE = "KRAKEN2_SEED_TEMPLATE"
MAX_DB_SIZE_VARIABLE = "KRAKEN2_MAX_DB_SIZE"
INSTALL_DIR_VARIABLE = "KRAKEN2_DIR"

DOWNLOAD_TAXONOMY_PROGRAM = "download_taxonomy.sh"
DOWNLOAD_LIBRARY_PROGRAM = "download_genomic_library.sh"
ADD_TO_LIBRARY_PROGRAM = "add_to_library.sh"
BUILD_PROGRAM = "build_kraken2_db.sh"
STANDARD_PROGRAM = "standard_installation.sh"
CLEAN_PROGRAM = "clean_db.sh"
SPECIAL_PROGRAM = "build_special_database.sh"

EXIT_USAGE = 64
EXIT_CONFIGURATION = 1
EXIT_NOT_EXECUTABLE = 126
EXIT_NOT_FOUND = 127
