"""Test the tower_sim.tower module."""
import unittest

from tower_sim.errors import NoSuitableGateError
from tower_sim.tower import ControlTower
from tower_sim.types import (
    AircraftCharacteristics,
    AirplaneTerminal,
    FreightAircraft,
    Gate,
    HelicopterTerminal,
    PassengerAircraft,
    Task,
    TaskList,
    TaskType,
)

B747 = AircraftCharacteristics.BOEING_747_8F
A320 = AircraftCharacteristics.AIRBUS_A320
R44 = AircraftCharacteristics.ROBINSON_R44


def loading_task_list():
    return TaskList(
        [
            Task(TaskType.LOAD, 0),
            Task(TaskType.TAKEOFF),
            Task(TaskType.AWAY),
            Task(TaskType.LAND),
        ]
    )


def landing_task_list():
    return TaskList(
        [
            Task(TaskType.LAND),
            Task(TaskType.WAIT),
            Task(TaskType.LOAD, 0),
            Task(TaskType.TAKEOFF),
            Task(TaskType.AWAY),
        ]
    )


def terminal_with_gates(terminal_cls, terminal_number, num_gates):
    terminal = terminal_cls(terminal_number)
    for gate_number in range(1, num_gates + 1):
        terminal.add_gate(Gate(gate_number))
    return terminal


class TestGateSearch(unittest.TestCase):
    def setUp(self):
        self.tower = ControlTower()
        self.airplane = FreightAircraft("FDX1", B747, loading_task_list(), 0.0, 0)
        self.helicopter = PassengerAircraft("R44A", R44, loading_task_list(), 0.0, 0)

    def test_no_terminals(self):
        with self.assertRaises(NoSuitableGateError):
            self.tower.find_unoccupied_gate(self.airplane)

    def test_skips_type_mismatched_terminals(self):
        helicopter_terminal = terminal_with_gates(HelicopterTerminal, 1, 2)
        airplane_terminal = terminal_with_gates(AirplaneTerminal, 2, 2)
        self.tower.add_terminal(helicopter_terminal)
        self.tower.add_terminal(airplane_terminal)

        self.assertIs(
            self.tower.find_unoccupied_gate(self.airplane), airplane_terminal.gates[0]
        )
        self.assertIs(
            self.tower.find_unoccupied_gate(self.helicopter),
            helicopter_terminal.gates[0],
        )

    def test_skips_terminals_under_emergency(self):
        closed = terminal_with_gates(AirplaneTerminal, 1, 2)
        closed.declare_emergency()
        self.tower.add_terminal(closed)

        with self.assertRaises(NoSuitableGateError):
            self.tower.find_unoccupied_gate(self.airplane)

        open_terminal = terminal_with_gates(AirplaneTerminal, 2, 1)
        self.tower.add_terminal(open_terminal)
        self.assertIs(
            self.tower.find_unoccupied_gate(self.airplane), open_terminal.gates[0]
        )

    def test_moves_on_when_terminal_is_full(self):
        full = terminal_with_gates(AirplaneTerminal, 1, 1)
        full.gates[0].park_aircraft(
            FreightAircraft("FDX2", B747, loading_task_list(), 0.0, 0)
        )
        spare = terminal_with_gates(AirplaneTerminal, 2, 1)
        self.tower.add_terminal(full)
        self.tower.add_terminal(spare)

        self.assertIs(self.tower.find_unoccupied_gate(self.airplane), spare.gates[0])

    def test_find_gate_of_aircraft(self):
        terminal = terminal_with_gates(AirplaneTerminal, 1, 2)
        self.tower.add_terminal(terminal)
        self.assertIsNone(self.tower.find_gate_of_aircraft(self.airplane))

        terminal.gates[1].park_aircraft(self.airplane)
        self.assertIs(
            self.tower.find_gate_of_aircraft(self.airplane), terminal.gates[1]
        )


class TestAddAircraft(unittest.TestCase):
    def setUp(self):
        self.tower = ControlTower()
        self.terminal = terminal_with_gates(AirplaneTerminal, 1, 1)
        self.tower.add_terminal(self.terminal)

    def test_loading_aircraft_is_parked_and_filed(self):
        aircraft = FreightAircraft("FDX1", B747, loading_task_list(), 0.0, 0)
        self.tower.add_aircraft(aircraft)

        self.assertIs(self.terminal.gates[0].aircraft_at_gate, aircraft)
        self.assertEqual(self.tower.loading_aircraft, {aircraft: 2})
        self.assertEqual(self.tower.aircraft, [aircraft])

    def test_landing_aircraft_needs_no_gate(self):
        aircraft = FreightAircraft("FDX1", B747, landing_task_list(), 0.0, 0)
        self.tower.add_aircraft(aircraft)

        self.assertFalse(self.terminal.gates[0].is_occupied())
        self.assertEqual(self.tower.landing_queue.aircraft_in_order(), [aircraft])

    def test_no_gate_for_loading_aircraft(self):
        self.tower.add_aircraft(
            FreightAircraft("FDX1", B747, loading_task_list(), 0.0, 0)
        )
        second = FreightAircraft("FDX2", B747, loading_task_list(), 0.0, 0)
        with self.assertRaises(NoSuitableGateError):
            self.tower.add_aircraft(second)

        # Still under jurisdiction and filed, just not parked
        self.assertIn(second, self.tower.aircraft)
        self.assertIn(second, self.tower.loading_aircraft)
        self.assertIsNone(self.tower.find_gate_of_aircraft(second))

    def test_waiting_aircraft_is_parked(self):
        aircraft = FreightAircraft(
            "FDX1", B747, TaskList([Task(TaskType.WAIT)]), 0.0, 0
        )
        self.tower.add_aircraft(aircraft)
        self.assertIs(self.terminal.gates[0].aircraft_at_gate, aircraft)
        self.assertEqual(self.tower.loading_aircraft, {})


class TestControlTowerTick(unittest.TestCase):
    def setUp(self):
        self.tower = ControlTower()
        self.terminal = terminal_with_gates(AirplaneTerminal, 1, 1)
        self.tower.add_terminal(self.terminal)

    def assert_filed_once(self):
        for aircraft in self.tower.aircraft:
            memberships = [
                self.tower.landing_queue.contains_aircraft(aircraft),
                self.tower.takeoff_queue.contains_aircraft(aircraft),
                aircraft in self.tower.loading_aircraft,
            ]
            self.assertLessEqual(sum(memberships), 1, aircraft.callsign)

    def test_load_takeoff_away_cycle(self):
        aircraft = FreightAircraft("FDX1", B747, loading_task_list(), 0.0, 0)
        self.tower.add_aircraft(aircraft)

        self.tower.tick()
        self.assertEqual(self.tower.loading_aircraft, {aircraft: 1})
        self.assertIs(self.terminal.gates[0].aircraft_at_gate, aircraft)

        self.tower.tick()
        self.assertEqual(self.tower.loading_aircraft, {})
        self.assertFalse(self.terminal.gates[0].is_occupied())
        self.assertEqual(aircraft.task_list.current_task.type, TaskType.TAKEOFF)
        self.assertEqual(self.tower.takeoff_queue.aircraft_in_order(), [aircraft])

        self.tower.tick()
        self.assertEqual(self.tower.takeoff_queue.aircraft_in_order(), [])
        self.assertEqual(aircraft.task_list.current_task.type, TaskType.AWAY)
        self.assertEqual(self.tower.ticks_elapsed, 3)

    def test_landing_only_on_even_ticks(self):
        aircraft = FreightAircraft("FDX1", B747, landing_task_list(), 1000.0, 500)
        self.tower.add_aircraft(aircraft)

        self.tower.tick()
        self.assertEqual(self.tower.landing_queue.aircraft_in_order(), [aircraft])
        self.assertFalse(self.terminal.gates[0].is_occupied())

        self.tower.tick()
        self.assertEqual(self.tower.landing_queue.aircraft_in_order(), [])
        self.assertIs(self.terminal.gates[0].aircraft_at_gate, aircraft)
        self.assertEqual(aircraft.task_list.current_task.type, TaskType.WAIT)
        self.assertEqual(aircraft.freight_amount, 0)

        # WAIT advances on its own, then the aircraft is filed for loading
        self.tower.tick()
        self.assertEqual(aircraft.task_list.current_task.type, TaskType.LOAD)
        self.assertEqual(self.tower.loading_aircraft, {aircraft: 2})

    def test_failed_landing_keeps_aircraft_queued_and_allows_takeoff(self):
        # Loads for 3 ticks, so it holds the only gate through tick 2
        blocker = PassengerAircraft("QFA0", A320, loading_task_list(), 0.0, 0)
        self.tower.add_aircraft(blocker)
        lander = FreightAircraft("FDX1", B747, landing_task_list(), 1000.0, 0)
        self.tower.add_aircraft(lander)
        first_out = FreightAircraft("FDX2", B747, loading_task_list(), 0.0, 0)
        first_out.task_list.move_to_next_task()
        second_out = FreightAircraft("FDX3", B747, loading_task_list(), 0.0, 0)
        second_out.task_list.move_to_next_task()
        self.tower.add_aircraft(first_out)
        self.tower.add_aircraft(second_out)

        # Tick 1 (odd): only the takeoff queue is served
        self.tower.tick()
        self.assertEqual(first_out.task_list.current_task.type, TaskType.AWAY)
        self.assertEqual(self.tower.takeoff_queue.aircraft_in_order(), [second_out])

        # Tick 2 (even): the landing fails, so the next takeoff goes instead
        self.tower.tick()
        self.assertEqual(second_out.task_list.current_task.type, TaskType.AWAY)
        self.assertEqual(self.tower.takeoff_queue.aircraft_in_order(), [])
        self.assertIs(self.tower.landing_queue.peek_aircraft(), lander)
        self.assertIsNone(self.tower.find_gate_of_aircraft(lander))
        self.assertIs(self.terminal.gates[0].aircraft_at_gate, blocker)
        self.assert_filed_once()

        # Tick 3 (odd): the blocker finishes loading and frees the gate, but
        # landings must wait for an even tick
        self.tower.tick()
        self.assertFalse(self.terminal.gates[0].is_occupied())
        self.assertEqual(self.tower.takeoff_queue.aircraft_in_order(), [blocker])
        self.assertIs(self.tower.landing_queue.peek_aircraft(), lander)

        # Tick 4 (even): the queued aircraft is retried and lands
        self.tower.tick()
        self.assertIs(self.terminal.gates[0].aircraft_at_gate, lander)
        # The two departures are back from AWAY and queue behind it
        self.assertEqual(
            self.tower.landing_queue.aircraft_in_order(), [first_out, second_out]
        )
        self.assertEqual(lander.task_list.current_task.type, TaskType.WAIT)
        self.assertEqual(self.tower.takeoff_queue.aircraft_in_order(), [blocker])
        self.assert_filed_once()

    def test_even_tick_falls_back_to_takeoff(self):
        departing = FreightAircraft("FDX2", B747, loading_task_list(), 0.0, 0)
        departing.task_list.move_to_next_task()
        other = FreightAircraft("FDX3", B747, loading_task_list(), 0.0, 0)
        other.task_list.move_to_next_task()
        self.tower.add_aircraft(departing)
        self.tower.add_aircraft(other)

        self.tower.tick()
        self.assertEqual(self.tower.takeoff_queue.aircraft_in_order(), [other])
        self.tower.tick()
        self.assertEqual(self.tower.takeoff_queue.aircraft_in_order(), [])

    def test_landing_follows_priority(self):
        calm = FreightAircraft("FDX1", B747, landing_task_list(), 100000.0, 0)
        urgent = FreightAircraft("FDX2", B747, landing_task_list(), 100000.0, 0)
        self.tower.add_aircraft(calm)
        self.tower.add_aircraft(urgent)
        urgent.declare_emergency()

        self.tower.tick()
        self.tower.tick()
        self.assertIs(self.terminal.gates[0].aircraft_at_gate, urgent)
        self.assertEqual(self.tower.landing_queue.aircraft_in_order(), [calm])

    def test_aircraft_filed_in_one_place_over_many_ticks(self):
        self.terminal.add_gate(Gate(2))
        self.tower.add_aircraft(
            FreightAircraft("FDX1", B747, landing_task_list(), 100000.0, 0)
        )
        self.tower.add_aircraft(
            PassengerAircraft("QFA1", A320, landing_task_list(), 20000.0, 100)
        )
        self.tower.add_aircraft(
            FreightAircraft("FDX2", B747, loading_task_list(), 0.0, 0)
        )
        for _ in range(40):
            self.tower.tick()
            self.assert_filed_once()
            for terminal in self.tower.terminals:
                parked = [g.aircraft_at_gate for g in terminal.gates if g.is_occupied()]
                self.assertEqual(len(parked), len(set(parked)))

    def test_restored_ticks_elapsed(self):
        tower = ControlTower(ticks_elapsed=10)
        tower.tick()
        self.assertEqual(tower.ticks_elapsed, 11)

    def test_loading_aircraft_is_a_copy(self):
        aircraft = FreightAircraft("FDX1", B747, loading_task_list(), 0.0, 0)
        self.tower.add_aircraft(aircraft)
        self.tower.loading_aircraft.clear()
        self.assertEqual(self.tower.loading_aircraft, {aircraft: 2})

    def test_str(self):
        self.tower.add_aircraft(
            FreightAircraft("FDX1", B747, loading_task_list(), 0.0, 0)
        )
        self.tower.add_aircraft(
            FreightAircraft("FDX2", B747, landing_task_list(), 0.0, 0)
        )
        self.assertEqual(
            str(self.tower),
            "ControlTower: 1 terminals, 2 total aircraft (1 LAND, 0 TAKEOFF, 1 LOAD)",
        )


if __name__ == "__main__":
    unittest.main()
