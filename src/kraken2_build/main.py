import sys
from pathlib import Path
from typing import Annotated, List, Optional

import typer
from loguru import logger

from kraken2_build import PROG, __version__
from kraken2_build.constants import (
    DEFAULT_BLOCK_SIZE,
    DEFAULT_LOAD_FACTOR,
    DEFAULT_THREAD_CT,
    DEFAULT_UPDATE_INTERVAL,
    VALID_LIBRARY_TYPES,
    VALID_SPECIAL_DB_TYPES,
)
from kraken2_build.defaults import NUCLEOTIDE_DEFAULTS, PROTEIN_DEFAULTS
from kraken2_build.dispatch import command_for, dispatch
from kraken2_build.environment import (
    export_environment,
    inherited_environment,
    resolve_install_directory,
)
from kraken2_build.exceptions import Kraken2BuildError, UsageError
from kraken2_build.log import configure_logging
from kraken2_build.models import TaskFlags
from kraken2_build.resolver import (
    resolve_configuration,
    validate_configuration,
)
from kraken2_build.tasks import select_task

# typer may ship its own click, take the usage error from what it raises
ClickUsageError = next(
    cls for cls in typer.BadParameter.__mro__ if cls.__name__ == "UsageError"
)

TASKS = "Tasks"

app = typer.Typer(add_completion=False, pretty_exceptions_enable=False)


def version_callback(value: Optional[bool]) -> None:
    if value:
        typer.echo(f"{PROG} version {__version__}")
        raise typer.Exit()


def _flag(value: bool) -> Optional[bool]:
    # a flag that was not given must not shadow the inherited environment
    return True if value else None


def _nt_aa(field: str) -> str:
    return (
        f"def: {getattr(NUCLEOTIDE_DEFAULTS, field)} nt, "
        f"{getattr(PROTEIN_DEFAULTS, field)} aa"
    )


@app.command()
def kraken2_build(
    db: Annotated[
        Optional[str],
        typer.Option(
            "--db",
            metavar="NAME",
            help="Kraken 2 DB name (mandatory except for --help/--version)",
        ),
    ] = None,
    threads: Annotated[
        Optional[int],
        typer.Option(
            "--threads", help=f"Number of threads (def: {DEFAULT_THREAD_CT})"
        ),
    ] = None,
    kmer_len: Annotated[
        Optional[int],
        typer.Option(
            "--kmer-len",
            help=(
                "K-mer length in bp/aa "
                f"(build task only; {_nt_aa('kmer_len')})"
            ),
        ),
    ] = None,
    minimizer_len: Annotated[
        Optional[int],
        typer.Option(
            "--minimizer-len",
            help=(
                "Minimizer length in bp/aa "
                f"(build task only; {_nt_aa('minimizer_len')})"
            ),
        ),
    ] = None,
    minimizer_spaces: Annotated[
        Optional[int],
        typer.Option(
            "--minimizer-spaces",
            help=(
                "Number of characters in minimizer that are ignored in "
                f"comparisons (build task only; {_nt_aa('minimizer_spaces')})"
            ),
        ),
    ] = None,
    protein: Annotated[
        bool,
        typer.Option(
            "--protein",
            help="Build a protein database for translated search",
        ),
    ] = False,
    masking: Annotated[
        Optional[bool],
        typer.Option(
            "--masking/--no-masking",
            help=(
                "Mask low-complexity sequences prior to building (def: on); "
                "masking requires dustmasker or segmasker in PATH"
            ),
        ),
    ] = None,
    max_db_size: Annotated[
        Optional[int],
        typer.Option(
            "--max-db-size",
            help=(
                "Maximum number of bytes for the hash table; the library is "
                "downsampled to fit if more would be needed"
            ),
        ),
    ] = None,
    use_ftp: Annotated[
        bool,
        typer.Option(
            "--use-ftp", help="Use FTP for downloading instead of RSYNC"
        ),
    ] = False,
    skip_maps: Annotated[
        bool,
        typer.Option(
            "--skip-maps",
            help="Avoid downloading accession number to taxid maps",
        ),
    ] = False,
    load_factor: Annotated[
        Optional[float],
        typer.Option(
            "--load-factor",
            metavar="FRACTION",
            help=(
                "Proportion of the hash table to be populated "
                f"(def: {DEFAULT_LOAD_FACTOR}, must be in (0, 1])"
            ),
        ),
    ] = None,
    fast_build: Annotated[
        bool,
        typer.Option(
            "--fast-build",
            help=(
                "Do not require a deterministic build when using multiple "
                "threads; faster, but minimizer/LCA pairs may vary"
            ),
        ),
    ] = False,
    block_size: Annotated[
        Optional[int],
        typer.Option(
            "--block-size",
            help=(
                "Bytes read per block when building "
                f"(def: {DEFAULT_BLOCK_SIZE})"
            ),
        ),
    ] = None,
    subblock_size: Annotated[
        Optional[int],
        typer.Option(
            "--subblock-size",
            help="Bytes per thread in a block (def: block size / threads)",
        ),
    ] = None,
    minimum_bits_for_taxid: Annotated[
        Optional[int],
        typer.Option(
            "--minimum-bits-for-taxid",
            help=(
                "Bits reserved for taxonomy IDs "
                "(def: 0, chosen automatically)"
            ),
        ),
    ] = None,
    update_interval: Annotated[
        Optional[int],
        typer.Option(
            "--update-interval",
            help=(
                "Sequences processed between progress updates "
                f"(def: {DEFAULT_UPDATE_INTERVAL})"
            ),
        ),
    ] = None,
    only_estimate: Annotated[
        bool,
        typer.Option(
            "--only-estimate",
            help="Report the estimated hash table capacity and stop",
        ),
    ] = False,
    download_taxonomy: Annotated[
        bool,
        typer.Option(
            "--download-taxonomy",
            help="Download NCBI taxonomic information",
            rich_help_panel=TASKS,
        ),
    ] = False,
    download_library: Annotated[
        Optional[str],
        typer.Option(
            "--download-library",
            metavar="TYPE",
            help=(
                "Download partial library, TYPE is one of "
                f"{', '.join(VALID_LIBRARY_TYPES)}"
            ),
            rich_help_panel=TASKS,
        ),
    ] = None,
    add_to_library: Annotated[
        Optional[str],
        typer.Option(
            "--add-to-library",
            metavar="FILE",
            help="Add FILE to library",
            rich_help_panel=TASKS,
        ),
    ] = None,
    build: Annotated[
        bool,
        typer.Option(
            "--build",
            help=(
                "Create DB from library (requires taxonomy and at least one "
                "file in library)"
            ),
            rich_help_panel=TASKS,
        ),
    ] = False,
    standard: Annotated[
        bool,
        typer.Option(
            "--standard",
            help="Download and build default database",
            rich_help_panel=TASKS,
        ),
    ] = False,
    clean: Annotated[
        bool,
        typer.Option(
            "--clean",
            help="Remove unneeded files from a built database",
            rich_help_panel=TASKS,
        ),
    ] = False,
    special: Annotated[
        Optional[str],
        typer.Option(
            "--special",
            metavar="TYPE",
            help=(
                "Download and build a special database, TYPE is one of "
                f"{', '.join(VALID_SPECIAL_DB_TYPES)}"
            ),
            rich_help_panel=TASKS,
        ),
    ] = None,
    env_file: Annotated[
        Optional[Path],
        typer.Option(
            "--env-file",
            metavar="PATH",
            help=(
                "Read KRAKEN2_* defaults from a dotenv file; the process "
                "environment takes precedence"
            ),
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose", help="Log resolved settings before dispatching"
        ),
    ] = False,
    show_version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Print version information",
        ),
    ] = None,
) -> None:
    """
    Build a Kraken 2 database. Exactly one task option must be selected.
    """
    configure_logging(verbose)

    task = select_task(
        TaskFlags(
            download_taxonomy=download_taxonomy,
            download_library=download_library,
            add_to_library=add_to_library,
            build=build,
            standard=standard,
            clean=clean,
            special=special,
        )
    )

    inherited = inherited_environment(env_file)

    config = resolve_configuration(
        cli_overrides={
            "db_name": db,
            "thread_count": threads,
            "kmer_len": kmer_len,
            "minimizer_len": minimizer_len,
            "minimizer_spaces": minimizer_spaces,
            "is_protein": _flag(protein),
            "masking": masking,
            "max_db_size": max_db_size,
            "use_ftp": _flag(use_ftp),
            "skip_maps": _flag(skip_maps),
            "load_factor": load_factor,
            "fast_build": _flag(fast_build),
            "block_size": block_size,
            "subblock_size": subblock_size,
            "min_taxid_bits": minimum_bits_for_taxid,
            "update_interval": update_interval,
            "only_estimate": _flag(only_estimate),
        },
        inherited_env=inherited,
    )
    config = validate_configuration(config)

    # unknown subtypes are rejected before anything is exported
    command_for(task)

    export_environment(config, resolve_install_directory(inherited))

    dispatch(task)


def usage() -> str:
    command = typer.main.get_command(app)
    with typer.Context(command, info_name=PROG) as ctx:
        return command.get_usage(ctx)


def run(argv: Optional[List[str]] = None) -> int:
    configure_logging()

    try:
        result = app(args=argv, prog_name=PROG, standalone_mode=False)
    except (ClickUsageError, UsageError) as error:
        message = (
            error.format_message()
            if isinstance(error, ClickUsageError)
            else str(error)
        )
        logger.error(message)
        typer.echo(usage(), err=True)
        typer.echo(f"Try '{PROG} --help' for help.", err=True)
        return UsageError.exit_code
    except Kraken2BuildError as error:
        logger.error(str(error))
        return error.exit_code

    return result if isinstance(result, int) else 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
