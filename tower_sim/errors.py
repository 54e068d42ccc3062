"""Define the exceptions raised by the tower simulation."""


class TowerSimError(Exception):
    """Base class for all tower simulation errors."""


class NoSuitableGateError(TowerSimError):
    """No unoccupied gate of a compatible terminal could be found for an aircraft."""


class NoSpaceError(TowerSimError):
    """A gate or terminal is already full."""


class MalformedSaveError(TowerSimError):
    """A saved tower state could not be decoded."""
