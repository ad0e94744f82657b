from kraken2_build.constants import (
    EXIT_CONFIGURATION,
    EXIT_NOT_EXECUTABLE,
    EXIT_USAGE,
)


class Kraken2BuildError(Exception):
    exit_code = EXIT_CONFIGURATION


class UsageError(Kraken2BuildError):
    exit_code = EXIT_USAGE


class NoTaskSelectedError(UsageError):
    pass


class MultipleTasksSelectedError(UsageError):
    pass


class UnknownSubtypeError(UsageError):
    pass


class ConfigurationError(Kraken2BuildError):
    def __init__(self, field: str, reason: str) -> None:
        super().__init__(reason)
        self.field = field
        self.reason = reason


class DispatchError(Kraken2BuildError):
    def __init__(
        self, program: str, reason: str, exit_code: int = EXIT_NOT_EXECUTABLE
    ) -> None:
        super().__init__(f"unable to execute {program}: {reason}")
        self.program = program
        self.exit_code = exit_code
