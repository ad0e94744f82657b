import os
import sys
from pathlib import Path
from typing import Dict, Mapping, MutableMapping, Optional

from dotenv import dotenv_values
from loguru import logger

from kraken2_build.constants import (
    CLASSIFY_PROGRAM,
    ENVIRONMENT_VARIABLES,
    INSTALL_DIR_VARIABLE,
    MAX_DB_SIZE_VARIABLE,
    SEED_TEMPLATE_VARIABLE,
)
from kraken2_build.exceptions import ConfigurationError
from kraken2_build.models import BuildConfiguration


def inherited_environment(env_file: Optional[Path] = None) -> Dict[str, str]:
    """Process environment, layered over an optional dotenv file."""
    file_values: Dict[str, str] = {}

    if env_file is not None:
        env_path = Path(env_file)
        if not env_path.is_file():
            raise ConfigurationError(
                "env_file", f"{env_path.as_posix()} was not found"
            )
        file_values = {
            key: value
            for key, value in dotenv_values(env_path).items()
            if value is not None
        }

    return {**file_values, **os.environ}


def resolve_install_directory(
    inherited_env: Mapping[str, str], argv0: Optional[str] = None
) -> Path:
    configured = inherited_env.get(INSTALL_DIR_VARIABLE)
    if configured and (Path(configured) / CLASSIFY_PROGRAM).exists():
        return Path(configured)

    # executables got moved, fall back to wherever this script lives
    script = argv0 if argv0 is not None else sys.argv[0]
    return Path(script).resolve().parent


def _serialize(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else ""
    return str(value)


def _prefixed_path(install_dir: str, inherited_path: str) -> str:
    if not inherited_path:
        return install_dir
    if inherited_path.split(os.pathsep)[0] == install_dir:
        return inherited_path
    return f"{install_dir}{os.pathsep}{inherited_path}"


def environment_for(
    config: BuildConfiguration,
    install_dir: Path | str,
    inherited_path: str = "",
) -> Dict[str, str]:
    exported = {
        variable: _serialize(getattr(config, field))
        for field, variable in ENVIRONMENT_VARIABLES.items()
    }
    exported[SEED_TEMPLATE_VARIABLE] = config.seed_template
    exported[MAX_DB_SIZE_VARIABLE] = _serialize(config.max_db_size)

    install_path = Path(install_dir).as_posix()
    exported[INSTALL_DIR_VARIABLE] = install_path
    exported["PATH"] = _prefixed_path(install_path, inherited_path)

    return exported


def export_environment(
    config: BuildConfiguration,
    install_dir: Path | str,
    environ: Optional[MutableMapping[str, str]] = None,
) -> Dict[str, str]:
    target = os.environ if environ is None else environ

    exported = environment_for(
        config, install_dir, inherited_path=target.get("PATH", "")
    )
    target.update(exported)

    for variable, value in exported.items():
        logger.debug(f"{variable}={value}")

    return exported
