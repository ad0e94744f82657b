import os
import sys
from typing import List, MutableMapping, NoReturn, Optional

from loguru import logger

from kraken2_build.constants import (
    ADD_TO_LIBRARY_PROGRAM,
    BUILD_PROGRAM,
    CLEAN_PROGRAM,
    DOWNLOAD_LIBRARY_PROGRAM,
    DOWNLOAD_TAXONOMY_PROGRAM,
    EXIT_NOT_EXECUTABLE,
    EXIT_NOT_FOUND,
    SPECIAL_PROGRAM,
    STANDARD_PROGRAM,
    VALID_LIBRARY_TYPES,
    VALID_SPECIAL_DB_TYPES,
)
from kraken2_build.exceptions import DispatchError, UnknownSubtypeError
from kraken2_build.models import (
    AddToLibrary,
    Build,
    Clean,
    DownloadLibrary,
    DownloadTaxonomy,
    Special,
    Standard,
    Task,
)


def command_for(task: Task) -> List[str]:
    match task:
        case DownloadTaxonomy():
            return [DOWNLOAD_TAXONOMY_PROGRAM]
        case DownloadLibrary(library_type=library_type):
            if library_type not in VALID_LIBRARY_TYPES:
                raise UnknownSubtypeError(
                    f'Unknown library type "{library_type}"'
                )
            return [DOWNLOAD_LIBRARY_PROGRAM, library_type]
        case AddToLibrary(file_path=file_path):
            return [ADD_TO_LIBRARY_PROGRAM, file_path]
        case Build():
            return [BUILD_PROGRAM]
        case Standard():
            return [STANDARD_PROGRAM]
        case Clean():
            return [CLEAN_PROGRAM]
        case Special(special_type=special_type):
            if special_type not in VALID_SPECIAL_DB_TYPES:
                raise UnknownSubtypeError(
                    f'Unknown special database "{special_type}"'
                )
            return [SPECIAL_PROGRAM, special_type]
        case _:
            raise TypeError(f"{task!r} is not a task")


def dispatch(
    task: Task, environ: Optional[MutableMapping[str, str]] = None
) -> NoReturn:
    """Replace the current process with the program that runs ``task``."""
    command = command_for(task)
    program = command[0]

    logger.debug(f"executing {' '.join(command)}")

    sys.stdout.flush()
    sys.stderr.flush()

    try:
        os.execvpe(
            program, command, os.environ if environ is None else environ
        )
    except FileNotFoundError as error:
        raise DispatchError(
            program, error.strerror or "not found", EXIT_NOT_FOUND
        ) from error
    except OSError as error:
        raise DispatchError(
            program, error.strerror or str(error), EXIT_NOT_EXECUTABLE
        ) from error
