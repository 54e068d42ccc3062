"""Define types for the aircraft under a control tower's jurisdiction."""
from abc import ABC, abstractmethod
from enum import Enum

from tower_sim.types.tasks import TaskList, TaskType
from tower_sim.types.util import Callsign, Ticks, round_half_up

LITRE_OF_FUEL_WEIGHT = 0.8  # kg per litre
AWAY_FUEL_BURN_FRACTION = 0.1  # of fuel capacity, per AWAY tick
AVG_PASSENGER_WEIGHT = 90  # kg

PASSENGER_AIRPLANE_LOADING_TIME = 3
PASSENGER_HELICOPTER_LOADING_TIME = 2
FREIGHT_AIRPLANE_LOADING_TIME = 2
FREIGHT_HELICOPTER_LOADING_TIME = 1


class AircraftType(Enum):
    AIRPLANE = "AIRPLANE"
    HELICOPTER = "HELICOPTER"

    def __str__(self) -> str:
        return self.value


class AircraftCharacteristics(Enum):
    """The catalogue of aircraft models known to the tower.

    Each member carries its aircraft type, empty weight (kg), maximum takeoff
    weight (kg), fuel capacity (litres), passenger capacity and freight capacity
    (kg).
    """

    AIRBUS_A320 = (AircraftType.AIRPLANE, 42600, 78000, 27200, 150, 0)
    BOEING_747_8F = (AircraftType.AIRPLANE, 197131, 447700, 226117, 0, 137756)
    ROBINSON_R44 = (AircraftType.HELICOPTER, 658, 1134, 190, 4, 0)
    BOEING_787 = (AircraftType.AIRPLANE, 119950, 227930, 126206, 242, 0)
    FOKKER_100 = (AircraftType.AIRPLANE, 24375, 44450, 13365, 97, 0)
    SIKORSKY_SKYCRANE = (AircraftType.HELICOPTER, 8724, 19050, 3328, 0, 9100)

    def __init__(
        self,
        aircraft_type: AircraftType,
        empty_weight: int,
        max_takeoff_weight: int,
        fuel_capacity: float,
        passenger_capacity: int,
        freight_capacity: int,
    ):
        self.type = aircraft_type
        self.empty_weight = empty_weight
        self.max_takeoff_weight = max_takeoff_weight
        self.fuel_capacity = fuel_capacity
        self.passenger_capacity = passenger_capacity
        self.freight_capacity = freight_capacity

    def __str__(self) -> str:
        return self.name


class Aircraft(ABC):
    """An aircraft with a task list, a fuel tank and an emergency flag.

    Two aircraft are the same entity if they share a callsign and characteristics.

    Attributes:
        callsign: The unique callsign of the aircraft.
        characteristics: The model of the aircraft.
        task_list: The tasks the aircraft cycles through.
        fuel_amount: Litres of fuel onboard.
    """

    def __init__(
        self,
        callsign: Callsign,
        characteristics: AircraftCharacteristics,
        task_list: TaskList,
        fuel_amount: float,
    ):
        if fuel_amount < 0:
            raise ValueError("Amount of fuel onboard cannot be negative")
        if fuel_amount > characteristics.fuel_capacity:
            raise ValueError("Amount of fuel onboard cannot exceed capacity")

        self.callsign = callsign
        self.characteristics = characteristics
        self.task_list = task_list
        self.fuel_amount = fuel_amount
        self._emergency = False

    @property
    def fuel_percent_remaining(self) -> int:
        capacity = self.characteristics.fuel_capacity
        return round_half_up(100 * self.fuel_amount / capacity)

    @property
    def total_weight(self) -> float:
        return (
            self.characteristics.empty_weight
            + self.fuel_amount * LITRE_OF_FUEL_WEIGHT
        )

    @property
    @abstractmethod
    def loading_time(self) -> Ticks:
        """Number of ticks this aircraft takes to load."""

    @abstractmethod
    def occupancy_level(self) -> int:
        """Percentage of passenger or freight capacity currently onboard."""

    @abstractmethod
    def unload(self) -> None:
        """Remove everything onboard."""

    @abstractmethod
    def onboard(self) -> int:
        """Number of passengers or kilograms of freight currently onboard."""

    def is_passenger_with_occupancy(self) -> bool:
        return False

    def declare_emergency(self) -> None:
        self._emergency = True

    def clear_emergency(self) -> None:
        self._emergency = False

    def has_emergency(self) -> bool:
        return self._emergency

    def tick(self) -> None:
        """Apply the effects of one tick in the current task.

        Fuel burns by a fixed fraction of capacity while AWAY and is replenished
        evenly over the loading time while LOAD.
        """
        current_task_type = self.task_list.current_task.type
        capacity = self.characteristics.fuel_capacity

        if current_task_type == TaskType.AWAY:
            self.fuel_amount = max(
                0.0, self.fuel_amount - capacity * AWAY_FUEL_BURN_FRACTION
            )
        elif current_task_type == TaskType.LOAD:
            self.fuel_amount = min(
                capacity, self.fuel_amount + capacity / self.loading_time
            )

    def _load_step(self, onboard: int, capacity: int) -> int:
        """Return the onboard amount after one tick of loading towards the target."""
        load_percent = self.task_list.current_task.load_percent
        target = round_half_up(capacity * load_percent / 100)
        if onboard >= target:
            return onboard
        step = max(1, round_half_up(target / self.loading_time))
        return min(target, onboard + step)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Aircraft):
            return NotImplemented
        return (
            self.callsign == other.callsign
            and self.characteristics == other.characteristics
        )

    def __hash__(self) -> int:
        return hash((self.callsign, self.characteristics))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.callsign!r})"

    def __str__(self) -> str:
        emergency = " (EMERGENCY)" if self.has_emergency() else ""
        return (
            f"{self.characteristics.type} {self.callsign} {self.characteristics} "
            f"{self.task_list.current_task.type}{emergency}"
        )


class PassengerAircraft(Aircraft):
    """An aircraft carrying passengers."""

    def __init__(
        self,
        callsign: Callsign,
        characteristics: AircraftCharacteristics,
        task_list: TaskList,
        fuel_amount: float,
        num_passengers: int,
    ):
        super().__init__(callsign, characteristics, task_list, fuel_amount)
        if num_passengers < 0:
            raise ValueError("Number of passengers cannot be negative")
        if num_passengers > characteristics.passenger_capacity:
            raise ValueError("Number of passengers cannot exceed capacity")
        self.num_passengers = num_passengers

    @property
    def loading_time(self) -> Ticks:
        if self.characteristics.type == AircraftType.HELICOPTER:
            return PASSENGER_HELICOPTER_LOADING_TIME
        return PASSENGER_AIRPLANE_LOADING_TIME

    @property
    def total_weight(self) -> float:
        return super().total_weight + self.num_passengers * AVG_PASSENGER_WEIGHT

    def occupancy_level(self) -> int:
        capacity = self.characteristics.passenger_capacity
        if capacity == 0:
            return 0
        return round_half_up(100 * self.num_passengers / capacity)

    def is_passenger_with_occupancy(self) -> bool:
        return self.num_passengers > 0

    def onboard(self) -> int:
        return self.num_passengers

    def unload(self) -> None:
        self.num_passengers = 0

    def tick(self) -> None:
        super().tick()
        if self.task_list.current_task.type == TaskType.LOAD:
            self.num_passengers = self._load_step(
                self.num_passengers, self.characteristics.passenger_capacity
            )


class FreightAircraft(Aircraft):
    """An aircraft carrying freight, measured in kilograms."""

    def __init__(
        self,
        callsign: Callsign,
        characteristics: AircraftCharacteristics,
        task_list: TaskList,
        fuel_amount: float,
        freight_amount: int,
    ):
        super().__init__(callsign, characteristics, task_list, fuel_amount)
        if freight_amount < 0:
            raise ValueError("Amount of freight cannot be negative")
        if freight_amount > characteristics.freight_capacity:
            raise ValueError("Amount of freight cannot exceed capacity")
        self.freight_amount = freight_amount

    @property
    def loading_time(self) -> Ticks:
        if self.characteristics.type == AircraftType.HELICOPTER:
            return FREIGHT_HELICOPTER_LOADING_TIME
        return FREIGHT_AIRPLANE_LOADING_TIME

    @property
    def total_weight(self) -> float:
        return super().total_weight + self.freight_amount

    def occupancy_level(self) -> int:
        capacity = self.characteristics.freight_capacity
        if capacity == 0:
            return 0
        return round_half_up(100 * self.freight_amount / capacity)

    def onboard(self) -> int:
        return self.freight_amount

    def unload(self) -> None:
        self.freight_amount = 0

    def tick(self) -> None:
        super().tick()
        if self.task_list.current_task.type == TaskType.LOAD:
            self.freight_amount = self._load_step(
                self.freight_amount, self.characteristics.freight_capacity
            )
