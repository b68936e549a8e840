"""Error taxonomy shared by the compute, render, and terminal layers."""


class AsciiMoonError(Exception):
    """Base class for all ascii-moon errors."""


class ConfigError(AsciiMoonError):
    """Invalid user configuration (date string, height, refresh period, ...)."""


class SizeError(ConfigError):
    """Requested disc height is below the drawable minimum."""


class CatalogLookupError(AsciiMoonError):
    """Unknown feature id or language index. Internal error."""


class TerminalError(AsciiMoonError):
    """The terminal could not be put into interactive mode."""


class PoemLoadWarning(UserWarning):
    """A poem file or language directory could not be used."""
