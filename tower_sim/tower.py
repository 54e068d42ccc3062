"""Define the control tower that schedules landings, loading and takeoffs."""
import logging
from typing import Optional

from tower_sim.errors import NoSuitableGateError
from tower_sim.queues import LandingQueue, TakeoffQueue
from tower_sim.types import Aircraft, Gate, TaskType, Terminal, Ticks

logger = logging.getLogger(__name__)


class ControlTower:
    """The control tower of an airport.

    Each tick the tower advances every aircraft under its jurisdiction, counts down
    aircraft that are loading at a gate, gives either a landing or a takeoff the
    runway, and then files every aircraft into the queue (or loading map) that
    matches its current task. An aircraft is only ever filed in one place.

    Attributes:
        landing_queue: Aircraft waiting to land.
        takeoff_queue: Aircraft waiting to take off.
    """

    def __init__(
        self,
        ticks_elapsed: Ticks = 0,
        aircraft: Optional[list[Aircraft]] = None,
        landing_queue: Optional[LandingQueue] = None,
        takeoff_queue: Optional[TakeoffQueue] = None,
        loading_aircraft: Optional[dict[Aircraft, Ticks]] = None,
    ):
        """
        Args:
            ticks_elapsed: Ticks that had already elapsed before this tower was
                created, e.g. when it is restored from a save.
            aircraft: The aircraft already under the tower's jurisdiction.
            landing_queue: A landing queue to start from.
            takeoff_queue: A takeoff queue to start from.
            loading_aircraft: Aircraft already loading, mapped to the number of
                ticks they have left to load.
        """
        self._initial_ticks_elapsed = ticks_elapsed
        self._ticks_called = 0
        self._aircraft = list(aircraft) if aircraft is not None else []
        self._terminals: list[Terminal] = []
        self.landing_queue = (
            landing_queue if landing_queue is not None else LandingQueue()
        )
        self.takeoff_queue = (
            takeoff_queue if takeoff_queue is not None else TakeoffQueue()
        )
        self._loading_aircraft = (
            dict(loading_aircraft) if loading_aircraft is not None else {}
        )

    @property
    def ticks_elapsed(self) -> Ticks:
        return self._initial_ticks_elapsed + self._ticks_called

    @property
    def aircraft(self) -> list[Aircraft]:
        return list(self._aircraft)

    @property
    def terminals(self) -> list[Terminal]:
        return list(self._terminals)

    @property
    def loading_aircraft(self) -> dict[Aircraft, Ticks]:
        return dict(self._loading_aircraft)

    def add_terminal(self, terminal: Terminal) -> None:
        self._terminals.append(terminal)

    def add_aircraft(self, aircraft: Aircraft) -> None:
        """Bring an aircraft under the tower's jurisdiction.

        Aircraft that are waiting or loading need a gate straight away. Whether or
        not one is found, the aircraft is filed into the queue matching its task.

        Raises:
            NoSuitableGateError: if a waiting or loading aircraft cannot be parked.
        """
        self._aircraft.append(aircraft)
        try:
            if aircraft.task_list.current_task.type in (TaskType.WAIT, TaskType.LOAD):
                gate = self.find_unoccupied_gate(aircraft)
                gate.park_aircraft(aircraft)
        except NoSuitableGateError:
            logger.warning(f"No gate available to park {aircraft.callsign}")
            raise
        finally:
            self.place_aircraft_in_queues(aircraft)

    def find_unoccupied_gate(self, aircraft: Aircraft) -> Gate:
        """Find a gate for an aircraft in the first suitable terminal that has one.

        Terminals are searched in the order they were added. A terminal is suitable
        if it serves the aircraft's type and is not under an emergency.

        Raises:
            NoSuitableGateError: if no suitable terminal has an unoccupied gate.
        """
        gate = self._search_gate(aircraft)
        if gate is None:
            raise NoSuitableGateError(f"No gate available for {aircraft.callsign}")
        return gate

    def _search_gate(self, aircraft: Aircraft) -> Optional[Gate]:
        aircraft_type = aircraft.characteristics.type
        for terminal in self._terminals:
            if terminal.aircraft_type != aircraft_type or terminal.has_emergency():
                continue

            gate = terminal.find_unoccupied_gate()
            if gate is not None:
                return gate

        return None

    def find_gate_of_aircraft(self, aircraft: Aircraft) -> Optional[Gate]:
        """Return the gate the aircraft is parked at, or None if it is not parked."""
        for terminal in self._terminals:
            for gate in terminal.gates:
                if gate.aircraft_at_gate == aircraft:
                    return gate
        return None

    def tick(self) -> None:
        """Advance the simulation by one tick."""
        self._ticks_called += 1

        # WAIT and AWAY need no decision from the tower, so they always advance
        for aircraft in self._aircraft:
            aircraft.tick()
            if aircraft.task_list.current_task.type in (TaskType.WAIT, TaskType.AWAY):
                aircraft.task_list.move_to_next_task()

        self.load_aircraft()

        # Landings get the first chance on even ticks, takeoffs on odd ticks
        if self._ticks_called % 2 == 0:
            if not self.try_land_aircraft():
                self.try_take_off_aircraft()
        else:
            self.try_take_off_aircraft()

        self.place_all_aircraft_in_queues()

    def load_aircraft(self) -> None:
        """Count down every loading aircraft by one tick.

        Aircraft that finish loading leave their gate and move on to their next task.
        """
        new_loading_aircraft = {}
        for aircraft, ticks_remaining in self._loading_aircraft.items():
            ticks_remaining -= 1
            if ticks_remaining > 0:
                new_loading_aircraft[aircraft] = ticks_remaining
                continue

            gate = self.find_gate_of_aircraft(aircraft)
            if gate is not None:
                gate.aircraft_leaves()
            aircraft.task_list.move_to_next_task()
            logger.debug(f"{aircraft.callsign} finished loading")

        # Replace rather than update so the map is never mutated while iterated
        self._loading_aircraft = new_loading_aircraft

    def try_land_aircraft(self) -> bool:
        """Land the aircraft at the front of the landing queue, if it has a gate.

        An aircraft that cannot be given a gate stays in the queue and is retried at
        the next opportunity.

        Returns:
            True if an aircraft landed, False otherwise.
        """
        aircraft = self.landing_queue.peek_aircraft()
        if aircraft is None:
            return False

        gate = self._search_gate(aircraft)
        if gate is None:
            logger.debug(f"No gate for {aircraft.callsign}; landing denied")
            return False

        self.landing_queue.remove_aircraft()
        gate.park_aircraft(aircraft)
        aircraft.unload()
        aircraft.task_list.move_to_next_task()
        logger.debug(f"{aircraft.callsign} landed at gate {gate.gate_number}")
        return True

    def try_take_off_aircraft(self) -> None:
        """Let the aircraft at the front of the takeoff queue take off, if any."""
        aircraft = self.takeoff_queue.peek_aircraft()
        if aircraft is None:
            return

        aircraft.task_list.move_to_next_task()
        self.takeoff_queue.remove_aircraft()
        logger.debug(f"{aircraft.callsign} took off")

    def place_all_aircraft_in_queues(self) -> None:
        for aircraft in self._aircraft:
            self.place_aircraft_in_queues(aircraft)

    def place_aircraft_in_queues(self, aircraft: Aircraft) -> None:
        """File an aircraft into the queue or map matching its current task.

        Aircraft that are already filed there are left alone. WAIT and AWAY
        aircraft are not filed anywhere.
        """
        current_task_type = aircraft.task_list.current_task.type
        if current_task_type == TaskType.LAND:
            if not self.landing_queue.contains_aircraft(aircraft):
                self.landing_queue.add_aircraft(aircraft)
        elif current_task_type == TaskType.TAKEOFF:
            if not self.takeoff_queue.contains_aircraft(aircraft):
                self.takeoff_queue.add_aircraft(aircraft)
        elif current_task_type == TaskType.LOAD:
            if aircraft not in self._loading_aircraft:
                self._loading_aircraft[aircraft] = aircraft.loading_time

    def __str__(self) -> str:
        return (
            f"ControlTower: {len(self._terminals)} terminals, "
            f"{len(self._aircraft)} total aircraft "
            f"({len(self.landing_queue)} LAND, "
            f"{len(self.takeoff_queue)} TAKEOFF, "
            f"{len(self._loading_aircraft)} LOAD)"
        )
