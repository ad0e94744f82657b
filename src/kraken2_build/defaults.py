from pydantic import BaseModel, ConfigDict


class ModeDefaults(BaseModel):
    model_config = ConfigDict(frozen=True)

    kmer_len: int
    minimizer_len: int
    minimizer_spaces: int


NUCLEOTIDE_DEFAULTS = ModeDefaults(
    kmer_len=35, minimizer_len=31, minimizer_spaces=7
)
PROTEIN_DEFAULTS = ModeDefaults(
    kmer_len=15, minimizer_len=12, minimizer_spaces=0
)


def defaults_for(is_protein: bool) -> ModeDefaults:
    return PROTEIN_DEFAULTS if is_protein else NUCLEOTIDE_DEFAULTS
