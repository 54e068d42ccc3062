"""Define types used in the control tower simulation."""
from tower_sim.types.aircraft import (
    Aircraft,
    AircraftCharacteristics,
    AircraftType,
    FreightAircraft,
    PassengerAircraft,
)
from tower_sim.types.ground import AirplaneTerminal, Gate, HelicopterTerminal, Terminal
from tower_sim.types.tasks import Task, TaskList, TaskType
from tower_sim.types.util import Callsign, Ticks

__all__ = [
    "Callsign",
    "Ticks",
    "TaskType",
    "Task",
    "TaskList",
    "AircraftType",
    "AircraftCharacteristics",
    "Aircraft",
    "PassengerAircraft",
    "FreightAircraft",
    "Gate",
    "Terminal",
    "AirplaneTerminal",
    "HelicopterTerminal",
]
