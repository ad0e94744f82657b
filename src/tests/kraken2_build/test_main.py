from pathlib import Path
from typing import Dict

import pytest
import typer

from kraken2_build import __version__
from kraken2_build.main import ClickUsageError, run


def test_version(capsys: pytest.CaptureFixture):
    assert run(["--version"]) == 0
    assert capsys.readouterr().out == f"kraken2-build version {__version__}\n"


def test_help(capsys: pytest.CaptureFixture):
    assert run(["--help"]) == 0

    out = capsys.readouterr().out
    assert "Usage: kraken2-build" in out
    for option in ("--download-library", "--special", "--minimizer-spaces"):
        assert option in out
    assert "UniVec_Core" in out
    assert "greengenes" in out


def test_usage_error_is_the_one_typer_raises():
    assert issubclass(typer.BadParameter, ClickUsageError)


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["--db", "testdb"],
        ["--db", "testdb", "--build", "--clean"],
        ["--db", "testdb", "--download-taxonomy", "--special", "rdp"],
        ["--db", "testdb", "--download-library", "archaeaa"],
        ["--db", "testdb", "--special", "ncbi"],
        ["--db", "testdb", "--build", "extra"],
        ["--db", "testdb", "--build", "--threads", "many"],
        ["--db", "testdb", "--build", "--unknown-option"],
        ["--db", "testdb", "--download-library"],
    ],
)
def test_usage_errors(argv, exec_recorder, capsys: pytest.CaptureFixture):
    assert run(argv) == 64
    assert exec_recorder.calls == []
    assert "Usage: kraken2-build" in capsys.readouterr().err


@pytest.mark.parametrize(
    "argv",
    [
        ["--build"],
        ["--db", "testdb", "--build", "--threads", "0"],
        ["--db", "testdb", "--build", "--minimizer-len", "32"],
        ["--db", "testdb", "--build", "--minimizer-len", "0"],
        ["--db", "testdb", "--build", "--load-factor", "1.01"],
        ["--db", "testdb", "--build", "--minimizer-spaces", "8"],
        ["--db", "testdb", "--build", "--env-file", "/no/such/file.env"],
    ],
)
def test_configuration_errors(argv, exec_recorder):
    assert run(argv) == 1
    assert exec_recorder.calls == []


def test_build_dispatch(
    exec_recorder, install_directory: Path, process_environment
):
    process_environment["KRAKEN2_DIR"] = install_directory.as_posix()

    with pytest.raises(exec_recorder.ProcessReplaced):
        run(["--db", "testdb", "--build", "--threads", "5"])

    ((program, argv, env),) = exec_recorder.calls
    assert program == "build_kraken2_db.sh"
    assert argv == ["build_kraken2_db.sh"]
    assert env["KRAKEN2_DB_NAME"] == "testdb"
    assert env["KRAKEN2_THREAD_CT"] == "5"
    assert env["KRAKEN2_SUBBLOCK_SIZE"] == "3277"
    assert env["KRAKEN2_SEED_TEMPLATE"] == "1" * 17 + "01" * 7
    assert env["KRAKEN2_MASK_LC"] == "1"
    assert env["KRAKEN2_DIR"] == install_directory.as_posix()
    assert env["PATH"].startswith(install_directory.as_posix())


def test_cli_overrides_inherited_environment(
    exec_recorder, process_environment: Dict[str, str]
):
    process_environment.update(
        {"KRAKEN2_KMER_LEN": "35", "KRAKEN2_DB_NAME": "inherited"}
    )

    with pytest.raises(exec_recorder.ProcessReplaced):
        run(
            [
                "--kmer-len",
                "20",
                "--minimizer-len",
                "15",
                "--minimizer-spaces",
                "3",
                "--no-masking",
                "--clean",
            ]
        )

    ((_, argv, env),) = exec_recorder.calls
    assert argv == ["clean_db.sh"]
    assert env["KRAKEN2_DB_NAME"] == "inherited"
    assert env["KRAKEN2_KMER_LEN"] == "20"
    assert env["KRAKEN2_SEED_TEMPLATE"] == "111111111010101"
    assert env["KRAKEN2_MASK_LC"] == ""


def test_protein_special_database(exec_recorder):
    with pytest.raises(exec_recorder.ProcessReplaced):
        run(["--db", "16S", "--protein", "--special", "silva", "--max-db-size", "1000"])

    ((_, argv, env),) = exec_recorder.calls
    assert argv == ["build_special_database.sh", "silva"]
    assert env["KRAKEN2_PROTEIN_DB"] == "1"
    assert env["KRAKEN2_KMER_LEN"] == "15"
    assert env["KRAKEN2_SEED_TEMPLATE"] == "1" * 12
    assert env["KRAKEN2_MAX_DB_SIZE"] == "1000"


def test_env_file_supplies_defaults(exec_recorder, tmp_path: Path):
    env_file = tmp_path / "kraken2.env"
    env_file.write_text("KRAKEN2_DB_NAME=fromfile\nKRAKEN2_USE_FTP=1\n")

    with pytest.raises(exec_recorder.ProcessReplaced):
        run(["--download-taxonomy", "--env-file", env_file.as_posix()])

    ((_, argv, env),) = exec_recorder.calls
    assert argv == ["download_taxonomy.sh"]
    assert env["KRAKEN2_DB_NAME"] == "fromfile"
    assert env["KRAKEN2_USE_FTP"] == "1"


@pytest.mark.parametrize(
    ("error", "exit_code"),
    [
        (FileNotFoundError(2, "No such file or directory"), 127),
        (PermissionError(13, "Permission denied"), 126),
    ],
)
def test_missing_program(exec_recorder, error, exit_code):
    exec_recorder.error = error

    assert run(["--db", "testdb", "--add-to-library", "genome.fa"]) == exit_code
    assert exec_recorder.calls[0][1] == ["add_to_library.sh", "genome.fa"]


@pytest.mark.parametrize(
    "argv",
    [
        ["--db", "testdb", "--build", "extra"],
        ["--db", "testdb", "--build", "--threads", "many"],
        ["--db", "testdb", "--build", "--load-factor", "most"],
        ["--db", "testdb", "--clean", "--unknown-option"],
        ["--db", "testdb", "--special"],
    ],
)
def test_parse_errors_exit_with_usage(
    argv, exec_recorder, capsys: pytest.CaptureFixture
):
    assert run(argv) == 64

    err = capsys.readouterr().err
    assert "Usage: kraken2-build" in err
    assert "Try 'kraken2-build --help' for help." in err
    assert exec_recorder.calls == []


def test_blank_database_name(exec_recorder):
    assert run(["--db", "   ", "--build"]) == 1
    assert exec_recorder.calls == []
