"""Define the queues of aircraft waiting to land or take off."""
from abc import ABC, abstractmethod
from collections import deque
from typing import Optional

from tower_sim.types import Aircraft

LOW_FUEL_THRESHOLD = 20  # percent, inclusive


class AircraftQueue(ABC):
    """A collection of aircraft waiting for a scheduling decision.

    An aircraft appears in a queue at most once. Removing or peeking from an empty
    queue returns None.
    """

    @abstractmethod
    def add_aircraft(self, aircraft: Aircraft) -> None:
        """Add an aircraft to the queue, unless it is already waiting in it."""

    @abstractmethod
    def remove_aircraft(self) -> Optional[Aircraft]:
        """Remove and return the aircraft at the front of the queue."""

    @abstractmethod
    def peek_aircraft(self) -> Optional[Aircraft]:
        """Return the aircraft at the front of the queue without removing it."""

    @abstractmethod
    def aircraft_in_order(self) -> list[Aircraft]:
        """Return a new list of the queued aircraft, front first."""

    @abstractmethod
    def contains_aircraft(self, aircraft: Aircraft) -> bool:
        """Return True if the aircraft is waiting in this queue."""

    def __len__(self) -> int:
        return len(self.aircraft_in_order())

    def encode(self) -> str:
        """Encode the queue as its type and size, then its callsigns in order."""
        aircraft = self.aircraft_in_order()
        encoded = f"{type(self).__name__}:{len(aircraft)}"
        if aircraft:
            encoded += "\n" + ",".join(a.callsign for a in aircraft)
        return encoded

    def __str__(self) -> str:
        callsigns = ", ".join(a.callsign for a in self.aircraft_in_order())
        return f"{type(self).__name__} [{callsigns}]"


class TakeoffQueue(AircraftQueue):
    """A first-in, first-out queue of aircraft waiting to take off."""

    def __init__(self):
        self._queue = deque()

    def add_aircraft(self, aircraft: Aircraft) -> None:
        if aircraft not in self._queue:
            self._queue.append(aircraft)

    def remove_aircraft(self) -> Optional[Aircraft]:
        if not self._queue:
            return None
        return self._queue.popleft()

    def peek_aircraft(self) -> Optional[Aircraft]:
        if not self._queue:
            return None
        return self._queue[0]

    def aircraft_in_order(self) -> list[Aircraft]:
        return list(self._queue)

    def contains_aircraft(self, aircraft: Aircraft) -> bool:
        return aircraft in self._queue


class LandingQueue(AircraftQueue):
    """A queue of aircraft waiting to land, ordered by urgency.

    Aircraft are kept in the order they were added. Every query recomputes the
    landing order from scratch, because an aircraft's urgency can change while it
    waits (fuel drains, an emergency is declared). The order is:

        1. aircraft with an emergency,
        2. aircraft with fuel at or below LOW_FUEL_THRESHOLD percent,
        3. passenger aircraft with passengers onboard,
        4. all other aircraft,

    with each aircraft placed in the first group it matches and ties broken by the
    order in which aircraft were added.
    """

    def __init__(self):
        self._waiting: list[Aircraft] = []

    def add_aircraft(self, aircraft: Aircraft) -> None:
        if aircraft not in self._waiting:
            self._waiting.append(aircraft)

    def remove_aircraft(self) -> Optional[Aircraft]:
        aircraft = self.peek_aircraft()
        if aircraft is not None:
            self._waiting.remove(aircraft)
        return aircraft

    def peek_aircraft(self) -> Optional[Aircraft]:
        ordered = self.aircraft_in_order()
        if not ordered:
            return None
        return ordered[0]

    def aircraft_in_order(self) -> list[Aircraft]:
        emergency, low_fuel, with_passengers, other = [], [], [], []
        for aircraft in self._waiting:
            if aircraft.has_emergency():
                emergency.append(aircraft)
            elif aircraft.fuel_percent_remaining <= LOW_FUEL_THRESHOLD:
                low_fuel.append(aircraft)
            elif aircraft.is_passenger_with_occupancy():
                with_passengers.append(aircraft)
            else:
                other.append(aircraft)

        return emergency + low_fuel + with_passengers + other

    def contains_aircraft(self, aircraft: Aircraft) -> bool:
        return aircraft in self.aircraft_in_order()
