"""Exceptions raised while turning changelogs into manifests."""

from __future__ import annotations


class ManifestError(Exception):
    """Base class for every error raised by this package."""


class ChangelogError(ManifestError, ValueError):
    """A changelog file cannot be turned into device information."""


class ChangelogFormatError(ChangelogError):
    pass


class IncompleteDeviceInfoError(ChangelogError):
    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__(f"missing {', '.join(self.missing)}")


class FirmwareResolutionError(ManifestError):
    """No single firmware file could be matched to a changelog version."""


class FirmwareNotFoundError(FirmwareResolutionError):
    pass


class AmbiguousFirmwareError(FirmwareResolutionError):
    def __init__(self, directory, candidates):
        self.directory = directory
        self.candidates = list(candidates)
        super().__init__(
            f"{len(self.candidates)} firmware files found in {directory}"
        )


class FirmwareFormatError(ManifestError, ValueError):
    """A firmware container could not be classified or decoded."""
