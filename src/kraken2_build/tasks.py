from typing import Callable, Dict, List

from loguru import logger

from kraken2_build.exceptions import (
    MultipleTasksSelectedError,
    NoTaskSelectedError,
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

TASK_BUILDERS: Dict[str, Callable[[object], Task]] = {
    "download_taxonomy": lambda _: DownloadTaxonomy(),
    "download_library": lambda value: DownloadLibrary(library_type=value),
    "add_to_library": lambda value: AddToLibrary(file_path=value),
    "build": lambda _: Build(),
    "standard": lambda _: Standard(),
    "clean": lambda _: Clean(),
    "special": lambda value: Special(special_type=value),
}


def _is_selected(value: object) -> bool:
    # boolean slots are selected when set, valued slots whenever given
    if isinstance(value, bool):
        return value
    return value is not None


def selected_slots(flags: TaskFlags) -> List[str]:
    return [
        slot
        for slot, value in flags.model_dump().items()
        if _is_selected(value)
    ]


def select_task(flags: TaskFlags) -> Task:
    slots = selected_slots(flags)

    if len(slots) > 1:
        raise MultipleTasksSelectedError(
            f"More than one task option selected ({', '.join(slots)})"
        )

    if not slots:
        raise NoTaskSelectedError("Must select a task option")

    (slot,) = slots
    task = TASK_BUILDERS[slot](getattr(flags, slot))

    logger.debug(f"selected task {task!r}")

    return task
