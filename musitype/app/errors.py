class MusitypeError(Exception):
    """Base class for errors raised outside the evaluation core."""


class SettingsError(MusitypeError):
    pass


class TextSourceError(MusitypeError):
    """A text could not be loaded or was rejected as practice text."""
