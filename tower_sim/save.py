"""Define methods for saving a control tower and restoring it from a save.

A save is made of four parts:
    - the number of ticks elapsed, as text;
    - the aircraft roster, as a table with one row per aircraft;
    - the takeoff queue, landing queue and loading aircraft, as text;
    - the terminals and their gates, as a table with one row per gate.
"""
import logging
import os
from typing import Iterator, Optional

import pandas as pd

from tower_sim.errors import MalformedSaveError, NoSpaceError
from tower_sim.queues import AircraftQueue, LandingQueue, TakeoffQueue
from tower_sim.tower import ControlTower
from tower_sim.types import (
    Aircraft,
    AircraftCharacteristics,
    AirplaneTerminal,
    FreightAircraft,
    Gate,
    HelicopterTerminal,
    PassengerAircraft,
    Task,
    TaskList,
    TaskType,
    Terminal,
    Ticks,
)

logger = logging.getLogger(__name__)

TICK_FILE = "tick.txt"
AIRCRAFT_FILE = "aircraft.csv"
QUEUES_FILE = "queues.txt"
TERMINALS_FILE = "terminals.csv"

AIRCRAFT_COLUMNS = [
    "callsign",
    "characteristics",
    "tasks",
    "fuel_amount",
    "emergency",
    "onboard",
]
TERMINAL_COLUMNS = [
    "terminal_type",
    "terminal_number",
    "emergency",
    "gate_number",
    "occupant",
]
TERMINAL_TYPES = {
    AirplaneTerminal.__name__: AirplaneTerminal,
    HelicopterTerminal.__name__: HelicopterTerminal,
}
LOADING_AIRCRAFT_HEADER = "LoadingAircraft"
CALLSIGN_SEPARATORS = (":", ",")


def _is_blank(value) -> bool:
    if isinstance(value, str):
        return value.strip() == ""
    return value is None or pd.isna(value)


def _parse_int(value, what: str) -> int:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    try:
        return int(str(value).strip())
    except ValueError as err:
        raise MalformedSaveError(f"Not a valid {what}: {value!r}") from err


def _parse_bool(value, what: str) -> bool:
    text = str(value).strip().lower()
    if text not in ("true", "false"):
        raise MalformedSaveError(f"Not a valid {what}: {value!r}")
    return text == "true"


def _check_columns(df: pd.DataFrame, columns: list[str]) -> None:
    missing = [column for column in columns if column not in df.columns]
    if missing:
        raise MalformedSaveError(f"Missing columns: {', '.join(missing)}")


def _find_aircraft(callsign: str, aircraft: list[Aircraft]) -> Aircraft:
    for candidate in aircraft:
        if candidate.callsign == callsign:
            return candidate
    raise MalformedSaveError(f"Unknown callsign: {callsign!r}")


def read_tick(text: str) -> Ticks:
    """Parse the number of ticks elapsed.

    Args:
        text: the saved tick count, a non-negative integer

    Raises:
        MalformedSaveError: if the tick count is not a non-negative integer.
    """
    ticks = _parse_int(text, "tick count")
    if ticks < 0:
        raise MalformedSaveError("Number of ticks must not be negative")
    return ticks


def read_task(text: str) -> Task:
    """Parse a single encoded task, e.g. "AWAY" or "LOAD@30"."""
    if text.startswith("LOAD@"):
        if text.count("@") != 1:
            raise MalformedSaveError(f"Not a valid load task: {text!r}")
        load_percent = _parse_int(text.split("@")[1], "load percentage")
        if load_percent < 0:
            raise MalformedSaveError("Load percentage must not be negative")
        return Task(TaskType.LOAD, load_percent)

    if text in ("AWAY", "LAND", "WAIT", "TAKEOFF"):
        return Task(TaskType(text))

    raise MalformedSaveError(f"Not a valid task: {text!r}")


def read_task_list(text: str) -> TaskList:
    """Parse an encoded task list, e.g. "LOAD@30,TAKEOFF,AWAY,LAND".

    Raises:
        MalformedSaveError: if a task cannot be parsed or the tasks do not form a
            valid task list.
    """
    tasks = [read_task(part) for part in str(text).split(",")]
    try:
        return TaskList(tasks)
    except ValueError as err:
        raise MalformedSaveError(f"Not a valid task list: {text!r}") from err


def parse_aircraft(aircraft_row) -> Aircraft:
    """
    Parse a row of the aircraft roster into an Aircraft object.

    Args:
        aircraft_row: a mapping (e.g. a row of a DataFrame) with the items
            - callsign
            - characteristics: the name of an AircraftCharacteristics member
            - tasks: the encoded task list, starting from the current task
            - fuel_amount: litres of fuel onboard
            - emergency: "true" or "false"
            - onboard: passengers or kilograms of freight onboard

    Raises:
        MalformedSaveError: if any item is missing or invalid.
    """
    callsign = str(aircraft_row["callsign"]).strip()
    if callsign == "":
        raise MalformedSaveError("Callsign must not be empty")
    # The queues file separates callsigns with these
    if any(separator in callsign for separator in CALLSIGN_SEPARATORS):
        raise MalformedSaveError(f"Callsign contains a separator: {callsign!r}")

    try:
        characteristics = AircraftCharacteristics[
            str(aircraft_row["characteristics"]).strip()
        ]
    except KeyError as err:
        raise MalformedSaveError(
            f"Not a valid aircraft model: {aircraft_row['characteristics']!r}"
        ) from err

    task_list = read_task_list(aircraft_row["tasks"])

    try:
        fuel_amount = float(str(aircraft_row["fuel_amount"]).strip())
    except ValueError as err:
        raise MalformedSaveError(
            f"Not a valid fuel amount: {aircraft_row['fuel_amount']!r}"
        ) from err
    onboard = _parse_int(aircraft_row["onboard"], "onboard amount")
    emergency = _parse_bool(aircraft_row["emergency"], "emergency state")

    aircraft_cls = (
        PassengerAircraft if characteristics.passenger_capacity > 0 else FreightAircraft
    )
    try:
        aircraft = aircraft_cls(
            callsign, characteristics, task_list, fuel_amount, onboard
        )
    except ValueError as err:
        raise MalformedSaveError(f"Invalid aircraft {callsign}: {err}") from err

    if emergency:
        aircraft.declare_emergency()

    return aircraft


def parse_roster(roster_df: pd.DataFrame) -> list[Aircraft]:
    """Parse a pandas dataframe of aircraft into a list of aircraft.

    Args:
        roster_df: A pandas dataframe with the columns described in parse_aircraft,
            one row per aircraft, in roster order.

    Returns:
        the aircraft, in the order of the rows
    """
    _check_columns(roster_df, AIRCRAFT_COLUMNS)
    aircraft = [parse_aircraft(row) for _, row in roster_df.iterrows()]

    callsigns = [a.callsign for a in aircraft]
    if len(set(callsigns)) != len(callsigns):
        raise MalformedSaveError("Aircraft callsigns must be unique")

    return aircraft


def parse_terminals(
    terminals_df: pd.DataFrame, aircraft: list[Aircraft]
) -> list[Terminal]:
    """Parse a pandas dataframe of gates into a list of terminals.

    Args:
        terminals_df: A pandas dataframe with the following columns:
            terminal_type: AirplaneTerminal or HelicopterTerminal
            terminal_number: The number of the terminal
            emergency: Whether the terminal is under emergency ("true"/"false")
            gate_number: The number of the gate, or blank for a terminal without
                gates
            occupant: The callsign of the aircraft at the gate, or blank
        aircraft: The aircraft roster that occupants refer to.

    Returns:
        the terminals, in the order they first appear
    """
    _check_columns(terminals_df, TERMINAL_COLUMNS)

    terminals: dict[tuple[str, int], Terminal] = {}
    for _, row in terminals_df.iterrows():
        terminal_type = str(row["terminal_type"]).strip()
        if terminal_type not in TERMINAL_TYPES:
            raise MalformedSaveError(f"Not a valid terminal type: {terminal_type!r}")
        terminal_number = _parse_int(row["terminal_number"], "terminal number")

        key = (terminal_type, terminal_number)
        if key not in terminals:
            try:
                terminal = TERMINAL_TYPES[terminal_type](terminal_number)
            except ValueError as err:
                raise MalformedSaveError(str(err)) from err
            if _parse_bool(row["emergency"], "emergency state"):
                terminal.declare_emergency()
            terminals[key] = terminal

        if _is_blank(row["gate_number"]):
            continue
        gate = _parse_gate(row["gate_number"], row["occupant"], aircraft)
        try:
            terminals[key].add_gate(gate)
        except NoSpaceError as err:
            raise MalformedSaveError(str(err)) from err

    return list(terminals.values())


def _parse_gate(gate_number, occupant, aircraft: list[Aircraft]) -> Gate:
    try:
        gate = Gate(_parse_int(gate_number, "gate number"))
    except ValueError as err:
        raise MalformedSaveError(str(err)) from err

    if not _is_blank(occupant) and str(occupant).strip() != "empty":
        gate.park_aircraft(_find_aircraft(str(occupant).strip(), aircraft))

    return gate


def _read_section_header(lines: Iterator[str], name: str) -> int:
    header = next(lines, None)
    if header is None:
        raise MalformedSaveError(f"Missing {name} section")
    if header.count(":") != 1:
        raise MalformedSaveError(f"Not a valid {name} header: {header!r}")

    header_name, count = header.split(":")
    if header_name != name:
        raise MalformedSaveError(f"Expected {name} section, found {header_name!r}")
    count = _parse_int(count, f"{name} size")
    if count < 0:
        raise MalformedSaveError(f"{name} size must not be negative")
    return count


def _read_section_items(lines: Iterator[str], name: str, count: int) -> list[str]:
    if count == 0:
        return []
    line = next(lines, None)
    if line is None:
        raise MalformedSaveError(f"{name} is missing its {count} entries")
    items = line.split(",")
    if len(items) != count:
        raise MalformedSaveError(
            f"{name} should have {count} entries, found {len(items)}"
        )
    return items


def read_queue(
    lines: Iterator[str], aircraft: list[Aircraft], queue: AircraftQueue
) -> None:
    """Read one encoded queue from the lines and add its aircraft to the queue."""
    name = type(queue).__name__
    count = _read_section_header(lines, name)
    for callsign in _read_section_items(lines, name, count):
        queue.add_aircraft(_find_aircraft(callsign, aircraft))


def read_loading_aircraft(
    lines: Iterator[str], aircraft: list[Aircraft], loading: dict[Aircraft, Ticks]
) -> None:
    """Read the encoded loading aircraft from the lines into the loading map."""
    count = _read_section_header(lines, LOADING_AIRCRAFT_HEADER)
    for item in _read_section_items(lines, LOADING_AIRCRAFT_HEADER, count):
        if item.count(":") != 1:
            raise MalformedSaveError(f"Not a valid loading entry: {item!r}")
        callsign, ticks = item.split(":")
        ticks = _parse_int(ticks, "loading ticks")
        if ticks < 1:
            raise MalformedSaveError("Loading aircraft must have at least 1 tick left")
        loading[_find_aircraft(callsign, aircraft)] = ticks


def read_queues(
    text: str,
    aircraft: list[Aircraft],
    takeoff_queue: TakeoffQueue,
    landing_queue: LandingQueue,
    loading: dict[Aircraft, Ticks],
) -> None:
    """Read the takeoff queue, landing queue and loading aircraft, in that order.

    Modifies the given queues and loading map.
    """
    lines = iter(text.splitlines())
    read_queue(lines, aircraft, takeoff_queue)
    read_queue(lines, aircraft, landing_queue)
    read_loading_aircraft(lines, aircraft, loading)


def create_control_tower(
    tick_text: str,
    roster_df: pd.DataFrame,
    queues_text: str,
    terminals_df: pd.DataFrame,
) -> ControlTower:
    """Restore a control tower from the four parts of a save."""
    ticks_elapsed = read_tick(tick_text)
    aircraft = parse_roster(roster_df)
    terminals = parse_terminals(terminals_df, aircraft)

    takeoff_queue = TakeoffQueue()
    landing_queue = LandingQueue()
    loading = {}
    read_queues(queues_text, aircraft, takeoff_queue, landing_queue, loading)

    tower = ControlTower(ticks_elapsed, aircraft, landing_queue, takeoff_queue, loading)
    for terminal in terminals:
        tower.add_terminal(terminal)

    logger.info(f"Restored {tower}")
    return tower


def encode_loading_aircraft(loading: dict[Aircraft, Ticks]) -> str:
    encoded = f"{LOADING_AIRCRAFT_HEADER}:{len(loading)}"
    if loading:
        encoded += "\n" + ",".join(
            f"{aircraft.callsign}:{ticks}" for aircraft, ticks in loading.items()
        )
    return encoded


def encode_queues(tower: ControlTower) -> str:
    return "\n".join(
        [
            tower.takeoff_queue.encode(),
            tower.landing_queue.encode(),
            encode_loading_aircraft(tower.loading_aircraft),
        ]
    )


def roster_to_dataframe(aircraft: list[Aircraft]) -> pd.DataFrame:
    """Build the roster table for a list of aircraft, one row per aircraft."""
    rows = [
        {
            "callsign": a.callsign,
            "characteristics": a.characteristics.name,
            "tasks": a.task_list.encode(),
            "fuel_amount": f"{a.fuel_amount:.2f}",
            "emergency": str(a.has_emergency()).lower(),
            "onboard": a.onboard(),
        }
        for a in aircraft
    ]
    return pd.DataFrame(rows, columns=AIRCRAFT_COLUMNS)


def terminals_to_dataframe(terminals: list[Terminal]) -> pd.DataFrame:
    """Build the terminal table for a list of terminals, one row per gate."""
    rows = []
    for terminal in terminals:
        terminal_info = {
            "terminal_type": type(terminal).__name__,
            "terminal_number": terminal.terminal_number,
            "emergency": str(terminal.has_emergency()).lower(),
        }
        if not terminal.gates:
            rows.append({**terminal_info, "gate_number": "", "occupant": ""})
        for gate in terminal.gates:
            occupant = gate.aircraft_at_gate
            rows.append(
                {
                    **terminal_info,
                    "gate_number": gate.gate_number,
                    "occupant": occupant.callsign if occupant is not None else "",
                }
            )
    return pd.DataFrame(rows, columns=TERMINAL_COLUMNS)


def load_control_tower(save_dir: str) -> ControlTower:
    """Restore a control tower from the save files in a directory."""
    with open(os.path.join(save_dir, TICK_FILE)) as f:
        tick_text = f.read()
    with open(os.path.join(save_dir, QUEUES_FILE)) as f:
        queues_text = f.read()

    # Read everything as text so blank cells stay blank and parsing is ours
    roster_df = pd.read_csv(
        os.path.join(save_dir, AIRCRAFT_FILE), dtype=str, keep_default_na=False
    )
    terminals_df = pd.read_csv(
        os.path.join(save_dir, TERMINALS_FILE), dtype=str, keep_default_na=False
    )

    return create_control_tower(tick_text, roster_df, queues_text, terminals_df)


def save_control_tower(tower: ControlTower, save_dir: Optional[str] = None) -> None:
    """Write the save files for a control tower into a directory.

    Args:
        tower: the tower to save
        save_dir: the directory to write to (created if needed); defaults to the
            current directory
    """
    save_dir = save_dir if save_dir is not None else os.getcwd()
    os.makedirs(save_dir, exist_ok=True)

    with open(os.path.join(save_dir, TICK_FILE), "w") as f:
        f.write(f"{tower.ticks_elapsed}\n")
    with open(os.path.join(save_dir, QUEUES_FILE), "w") as f:
        f.write(encode_queues(tower) + "\n")

    roster_to_dataframe(tower.aircraft).to_csv(
        os.path.join(save_dir, AIRCRAFT_FILE), index=False
    )
    terminals_to_dataframe(tower.terminals).to_csv(
        os.path.join(save_dir, TERMINALS_FILE), index=False
    )

    logger.info(f"Saved {tower} to {save_dir}")
