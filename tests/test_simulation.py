"""Test the tower_sim.simulation module."""
import unittest

from tower_sim.simulation import simulate_tower
from tower_sim.tower import ControlTower
from tower_sim.types import (
    AircraftCharacteristics,
    AirplaneTerminal,
    FreightAircraft,
    Gate,
    Task,
    TaskList,
    TaskType,
)


class TestSimulateTower(unittest.TestCase):
    def setUp(self):
        self.tower = ControlTower()
        terminal = AirplaneTerminal(1)
        terminal.add_gate(Gate(1))
        self.tower.add_terminal(terminal)

        task_list = TaskList(
            [
                Task(TaskType.LOAD, 0),
                Task(TaskType.TAKEOFF),
                Task(TaskType.AWAY),
                Task(TaskType.LAND),
            ]
        )
        self.aircraft = FreightAircraft(
            "FDX1", AircraftCharacteristics.BOEING_747_8F, task_list, 0.0, 0
        )
        self.tower.add_aircraft(self.aircraft)

    def test_records_one_row_per_tick(self):
        results = simulate_tower(self.tower, num_ticks=3)

        self.assertEqual(list(results["tick"]), [1, 2, 3])
        self.assertEqual(list(results["loading"]), [1, 0, 0])
        self.assertEqual(list(results["takeoff"]), [0, 1, 0])
        self.assertEqual(list(results["takeoff_order"]), ["", "FDX1", ""])
        self.assertEqual(self.tower.ticks_elapsed, 3)

    def test_zero_ticks(self):
        results = simulate_tower(self.tower, num_ticks=0)
        self.assertEqual(len(results), 0)
        self.assertIn("landing_order", results.columns)

    def test_negative_ticks(self):
        with self.assertRaises(ValueError):
            simulate_tower(self.tower, num_ticks=-1)

    def test_progress_bar(self):
        results = simulate_tower(self.tower, num_ticks=4, progress=True)
        self.assertEqual(len(results), 4)

        # Tick 4: the aircraft is back from AWAY and waiting to land
        self.assertEqual(results.iloc[-1]["landing_order"], "FDX1")


if __name__ == "__main__":
    unittest.main()
