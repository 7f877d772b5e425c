"""Custom exception hierarchy for migrun."""

from __future__ import annotations


class MigrunError(Exception):
    """Base for all migrun errors."""


class BookkeepingError(MigrunError):
    """The bookkeeping table could not be created."""


class AppliedVersionsQueryError(MigrunError):
    """Reading the applied versions from the bookkeeping table failed."""


class MigrationLoadError(MigrunError):
    """Migration sources could not be read."""


class DuplicateMigrationError(MigrationLoadError):
    """Two migration sources share the same version."""

    def __init__(self, version: int, identifiers: list[str]):
        self.version = version
        self.identifiers = identifiers
        super().__init__(
            f"duplicate migration version {version}: {', '.join(identifiers)}"
        )


class MigrationApplyError(MigrunError):
    """A single migration could not be applied."""

    def __init__(self, version: int, name: str, message: str):
        self.version = version
        self.name = name
        super().__init__(message)


class MigrationExecutionError(MigrationApplyError):
    """The migration body failed to execute."""

    def __init__(self, version: int, name: str, cause: Exception):
        super().__init__(
            version, name,
            f"failed to apply migration {version} ({name}): {cause}",
        )


class MigrationRecordError(MigrationApplyError):
    """The migration body ran but recording it failed."""

    def __init__(self, version: int, name: str, cause: Exception):
        super().__init__(
            version, name,
            f"failed to record migration {version} ({name}): {cause}",
        )
