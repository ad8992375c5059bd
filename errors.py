# errors.py
from __future__ import annotations


class EnigmaError(ValueError):
    """Base class for every failure raised by the simulator."""


class ConfigError(EnigmaError):
    """Truncated or malformed machine configuration."""


class PermutationError(EnigmaError):
    """Bad cycle notation: foreign symbol, duplicate, malformed cycle."""


class MachineSetupError(EnigmaError):
    """Invalid rotor selection, rotor settings or plugboard."""


class InputFormatError(EnigmaError):
    """Message stream that cannot be processed as given."""
