from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kraken2_build.constants import (
    DEFAULT_BLOCK_SIZE,
    DEFAULT_LOAD_FACTOR,
    DEFAULT_MIN_TAXID_BITS,
    DEFAULT_THREAD_CT,
    DEFAULT_UPDATE_INTERVAL,
)

FALSE_FLAG_VALUES = {"", "0"}


def parse_flag(value: Any) -> Any:
    """Flags are exported as "1" or "", any other value that is set is true."""
    if isinstance(value, str):
        return value.strip() not in FALSE_FLAG_VALUES
    return value


class Kraken2BaseModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class BuildConfiguration(Kraken2BaseModel):
    db_name: Optional[str] = None
    thread_count: int = DEFAULT_THREAD_CT
    is_protein: bool = False
    kmer_len: int
    minimizer_len: int
    minimizer_spaces: int
    seed_template: str = ""
    load_factor: float = DEFAULT_LOAD_FACTOR
    block_size: int = DEFAULT_BLOCK_SIZE
    # 0 until the resolver computes it from block_size and thread_count
    subblock_size: int = 0
    max_db_size: Optional[int] = None
    masking: bool = True
    use_ftp: bool = False
    skip_maps: bool = False
    fast_build: bool = False
    only_estimate: bool = False
    min_taxid_bits: int = DEFAULT_MIN_TAXID_BITS
    update_interval: int = DEFAULT_UPDATE_INTERVAL

    @field_validator(
        "is_protein",
        "masking",
        "use_ftp",
        "skip_maps",
        "fast_build",
        "only_estimate",
        mode="before",
    )
    @classmethod
    def coerce_flag(cls, value: Any) -> Any:
        return parse_flag(value)


class DownloadTaxonomy(Kraken2BaseModel):
    kind: Literal["download-taxonomy"] = "download-taxonomy"


class DownloadLibrary(Kraken2BaseModel):
    kind: Literal["download-library"] = "download-library"
    library_type: str


class AddToLibrary(Kraken2BaseModel):
    kind: Literal["add-to-library"] = "add-to-library"
    file_path: str


class Build(Kraken2BaseModel):
    kind: Literal["build"] = "build"


class Standard(Kraken2BaseModel):
    kind: Literal["standard"] = "standard"


class Clean(Kraken2BaseModel):
    kind: Literal["clean"] = "clean"


class Special(Kraken2BaseModel):
    kind: Literal["special"] = "special"
    special_type: str


Task = Annotated[
    Union[
        DownloadTaxonomy,
        DownloadLibrary,
        AddToLibrary,
        Build,
        Standard,
        Clean,
        Special,
    ],
    Field(discriminator="kind"),
]


class TaskFlags(Kraken2BaseModel):
    download_taxonomy: bool = False
    download_library: Optional[str] = None
    add_to_library: Optional[str] = None
    build: bool = False
    standard: bool = False
    clean: bool = False
    special: Optional[str] = None
