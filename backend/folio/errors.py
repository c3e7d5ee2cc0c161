"""Error kinds raised by the folio components.

Routes convert these into the user-visible error bodies; everything else
propagates unchanged.
"""


class FolioError(Exception):
    """Base class for all expected failures."""


class ConfigMissingError(FolioError):
    """A required environment variable is unset."""


class ConfigInvalidError(FolioError):
    """A configuration file could not be read or parsed."""


class AuthRejectedError(FolioError):
    """The broker refused to generate a session."""


class HoldingsFetchFailedError(FolioError):
    """The broker session was valid but holdings could not be listed."""


class UpstreamUnavailableError(FolioError):
    """The NAV feed could not be reached or answered with a non-2xx status."""


class UpstreamUnreadableError(FolioError):
    """The NAV feed body could not be read."""


class SymbolNotFoundError(FolioError):
    """No NAV line mentions the requested symbol."""


class MalformedNAVError(FolioError):
    """The NAV field of a matching line is not a number."""


class MalformedDateError(FolioError):
    """A month marker is not of the form MM/YYYY."""


class SnapshotReadFailedError(FolioError):
    """A snapshot file could not be read or decoded."""


class SnapshotWriteFailedError(FolioError):
    """A snapshot file could not be written."""


class BadRequestError(FolioError):
    """The request named an unknown account."""
