"""Define types for the gates and terminals aircraft park at."""
import logging
from dataclasses import dataclass, field
from typing import Optional

from tower_sim.errors import NoSpaceError
from tower_sim.types.aircraft import Aircraft, AircraftType
from tower_sim.types.util import round_half_up

logger = logging.getLogger(__name__)

MAX_NUM_GATES = 6


@dataclass(eq=False)
class Gate:
    """A parking gate that holds at most one aircraft.

    Attributes:
        gate_number: The number of the gate within its terminal.
        aircraft_at_gate: The aircraft parked here, if any.
    """

    gate_number: int
    aircraft_at_gate: Optional[Aircraft] = None

    def __post_init__(self):
        if self.gate_number < 1:
            raise ValueError("Gate number must be at least 1")

    def is_occupied(self) -> bool:
        return self.aircraft_at_gate is not None

    def park_aircraft(self, aircraft: Aircraft) -> None:
        """Park an aircraft at this gate.

        Raises:
            NoSpaceError: if another aircraft is already parked here.
        """
        if self.is_occupied():
            raise NoSpaceError(
                f"Gate {self.gate_number} is occupied by "
                f"{self.aircraft_at_gate.callsign}"
            )
        self.aircraft_at_gate = aircraft
        logger.debug(f"{aircraft.callsign} parked at gate {self.gate_number}")

    def aircraft_leaves(self) -> None:
        if self.aircraft_at_gate is not None:
            logger.debug(
                f"{self.aircraft_at_gate.callsign} left gate {self.gate_number}"
            )
        self.aircraft_at_gate = None

    def _occupant_callsign(self) -> str:
        if self.aircraft_at_gate is None:
            return "empty"
        return self.aircraft_at_gate.callsign

    def __str__(self) -> str:
        return f"Gate {self.gate_number} [{self._occupant_callsign()}]"


@dataclass(eq=False)
class Terminal:
    """A terminal holding an ordered collection of gates.

    Subclasses fix the type of aircraft the terminal can serve.

    Attributes:
        terminal_number: The number identifying this terminal.
        gates: The gates of this terminal, in the order they were added.
    """

    aircraft_type = None

    terminal_number: int
    gates: list[Gate] = field(default_factory=list)
    _emergency: bool = field(default=False, init=False, repr=False)

    def __post_init__(self):
        if self.terminal_number < 1:
            raise ValueError("Terminal number must be at least 1")
        if len(self.gates) > MAX_NUM_GATES:
            raise NoSpaceError(
                f"A terminal cannot have more than {MAX_NUM_GATES} gates"
            )

    def add_gate(self, gate: Gate) -> None:
        """Add a gate to the end of this terminal.

        Raises:
            NoSpaceError: if the terminal already has the maximum number of gates.
        """
        if len(self.gates) >= MAX_NUM_GATES:
            raise NoSpaceError(
                f"Terminal {self.terminal_number} already has {MAX_NUM_GATES} gates"
            )
        self.gates.append(gate)

    def find_unoccupied_gate(self) -> Optional[Gate]:
        """Return the first unoccupied gate in insertion order, or None."""
        for gate in self.gates:
            if not gate.is_occupied():
                return gate
        return None

    def declare_emergency(self) -> None:
        self._emergency = True

    def clear_emergency(self) -> None:
        self._emergency = False

    def has_emergency(self) -> bool:
        return self._emergency

    def occupancy_level(self) -> int:
        """Percentage of gates with an aircraft parked."""
        if not self.gates:
            return 0
        occupied = sum(1 for gate in self.gates if gate.is_occupied())
        return round_half_up(100 * occupied / len(self.gates))

    def __str__(self) -> str:
        emergency = " (EMERGENCY)" if self.has_emergency() else ""
        return (
            f"{type(self).__name__} {self.terminal_number}, "
            f"{len(self.gates)} gates{emergency}"
        )


class AirplaneTerminal(Terminal):
    aircraft_type = AircraftType.AIRPLANE


class HelicopterTerminal(Terminal):
    aircraft_type = AircraftType.HELICOPTER
