import math
from typing import Any, Dict, Mapping, Optional

from loguru import logger
from pydantic import ValidationError

from kraken2_build.constants import ENVIRONMENT_VARIABLES, MAX_MINIMIZER_LEN
from kraken2_build.defaults import defaults_for
from kraken2_build.exceptions import ConfigurationError
from kraken2_build.models import BuildConfiguration, parse_flag
from kraken2_build.seed import build_seed_template

FLAG_FIELDS = {
    "is_protein",
    "masking",
    "use_ftp",
    "skip_maps",
    "fast_build",
    "only_estimate",
}


def _lookup(
    field: str,
    cli_overrides: Mapping[str, Any],
    inherited_env: Mapping[str, str],
) -> Optional[Any]:
    override = cli_overrides.get(field)
    if override is not None:
        return override

    variable = ENVIRONMENT_VARIABLES.get(field)
    if variable is None or variable not in inherited_env:
        return None

    value = inherited_env[variable]

    # an empty flag means "off", an empty number means "unset"
    if field in FLAG_FIELDS:
        return parse_flag(value)
    return value if value.strip() else None


def _configuration_error(error: ValidationError) -> ConfigurationError:
    first = error.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or "configuration"
    variable = ENVIRONMENT_VARIABLES.get(field, field)
    return ConfigurationError(
        field,
        f"Invalid value {first.get('input')!r} for {field} ({variable}): "
        f"{first['msg']}",
    )


def resolve_configuration(
    cli_overrides: Mapping[str, Any],
    inherited_env: Mapping[str, str],
    protein: Optional[bool] = None,
) -> BuildConfiguration:
    """
    Merge CLI overrides, inherited KRAKEN2_* variables and mode defaults.

    For every field an override that is not None wins, then a variable from
    ``inherited_env``, then the default. The protein/nucleotide mode is
    resolved first since it picks the default table; ``protein`` forces it.
    """
    if protein is None:
        protein = bool(_lookup("is_protein", cli_overrides, inherited_env))

    values: Dict[str, Any] = {"is_protein": protein}
    values.update(defaults_for(protein).model_dump())

    for field in BuildConfiguration.model_fields:
        if field in ("is_protein", "seed_template"):
            continue
        value = _lookup(field, cli_overrides, inherited_env)
        if value is not None:
            values[field] = value

    try:
        config = BuildConfiguration.model_validate(values)
    except ValidationError as error:
        raise _configuration_error(error) from error

    if config.subblock_size == 0 and config.thread_count > 0:
        config = config.model_copy(
            update={
                "subblock_size": math.ceil(
                    config.block_size / config.thread_count
                )
            }
        )

    logger.debug(f"resolved configuration {config.model_dump()}")

    return config


def validate_configuration(config: BuildConfiguration) -> BuildConfiguration:
    """Check a resolved configuration, returning it with its seed template."""
    if not (config.db_name or "").strip():
        raise ConfigurationError("db_name", "Must specify a database name")

    if config.thread_count <= 0:
        raise ConfigurationError(
            "thread_count",
            f"Can't use nonpositive thread count of {config.thread_count}",
        )

    if config.minimizer_len > config.kmer_len:
        raise ConfigurationError(
            "minimizer_len",
            f"Minimizer length ({config.minimizer_len}) "
            f"must not be greater than k ({config.kmer_len})",
        )

    if config.minimizer_len <= 0:
        raise ConfigurationError(
            "minimizer_len",
            "Can't use nonpositive minimizer length of "
            f"{config.minimizer_len}",
        )

    if config.minimizer_len > MAX_MINIMIZER_LEN:
        raise ConfigurationError(
            "minimizer_len",
            f"Can't use minimizer len of {config.minimizer_len} "
            f"(must be <= {MAX_MINIMIZER_LEN})",
        )

    if not (0.0 < config.load_factor <= 1.0):
        raise ConfigurationError(
            "load_factor",
            "Load factor must be in the range (0, 1], "
            f"got {config.load_factor}",
        )

    if config.update_interval < 1:
        raise ConfigurationError(
            "update_interval",
            "Update interval must be at least 1, "
            f"got {config.update_interval}",
        )

    seed_template = build_seed_template(
        config.minimizer_len, config.minimizer_spaces
    )

    if config.block_size <= 0:
        raise ConfigurationError(
            "block_size",
            f"Can't use nonpositive block size of {config.block_size}",
        )

    if config.subblock_size <= 0:
        raise ConfigurationError(
            "subblock_size",
            f"Can't use nonpositive subblock size of {config.subblock_size}",
        )

    if config.max_db_size is not None and config.max_db_size <= 0:
        raise ConfigurationError(
            "max_db_size",
            "Can't use nonpositive maximum database size of "
            f"{config.max_db_size}",
        )

    if config.min_taxid_bits < 0:
        raise ConfigurationError(
            "min_taxid_bits",
            "Can't use negative minimum taxid bits of "
            f"{config.min_taxid_bits}",
        )

    return config.model_copy(update={"seed_template": seed_template})
