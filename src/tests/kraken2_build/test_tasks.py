import pytest
from pydantic import TypeAdapter

from kraken2_build.exceptions import (
    MultipleTasksSelectedError,
    NoTaskSelectedError,
    UsageError,
)
from kraken2_build.models import (
    AddToLibrary,
    Build,
    Clean,
    DownloadLibrary,
    DownloadTaxonomy,
    Special,
    Standard,
    Task,
    TaskFlags,
)
from kraken2_build.tasks import select_task


def test_no_task_selected():
    with pytest.raises(NoTaskSelectedError) as error:
        select_task(TaskFlags())

    assert isinstance(error.value, UsageError)


@pytest.mark.parametrize(
    "flags",
    [
        TaskFlags(build=True, clean=True),
        TaskFlags(download_taxonomy=True, special="silva"),
        TaskFlags(download_library="viral", add_to_library="genome.fa"),
        TaskFlags(
            download_taxonomy=True,
            download_library="viral",
            add_to_library="genome.fa",
            build=True,
            standard=True,
            clean=True,
            special="rdp",
        ),
    ],
)
def test_multiple_tasks_selected(flags: TaskFlags):
    with pytest.raises(MultipleTasksSelectedError):
        select_task(flags)


@pytest.mark.parametrize(
    ("flags", "expected"),
    [
        (TaskFlags(download_taxonomy=True), DownloadTaxonomy()),
        (
            TaskFlags(download_library="bacteria"),
            DownloadLibrary(library_type="bacteria"),
        ),
        (
            TaskFlags(add_to_library="genome.fa"),
            AddToLibrary(file_path="genome.fa"),
        ),
        (TaskFlags(build=True), Build()),
        (TaskFlags(standard=True), Standard()),
        (TaskFlags(clean=True), Clean()),
        (TaskFlags(special="greengenes"), Special(special_type="greengenes")),
    ],
)
def test_single_task_selected(flags: TaskFlags, expected):
    assert select_task(flags) == expected


def test_empty_value_still_selects_task():
    assert select_task(TaskFlags(download_library="")) == DownloadLibrary(
        library_type=""
    )


def test_tasks_are_discriminated_by_kind():
    adapter = TypeAdapter(Task)

    task = adapter.validate_python({"kind": "special", "special_type": "silva"})

    assert task == Special(special_type="silva")
    assert adapter.validate_python({"kind": "clean"}) == Clean()
