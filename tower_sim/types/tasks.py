"""Define the tasks an aircraft cycles through and the list that orders them."""
from dataclasses import dataclass
from enum import Enum


class TaskType(Enum):
    """The operational phases an aircraft can be in."""

    AWAY = "AWAY"
    LAND = "LAND"
    WAIT = "WAIT"
    LOAD = "LOAD"
    TAKEOFF = "TAKEOFF"

    def __str__(self) -> str:
        return self.value


# current task type -> task types allowed to follow it
ALLOWED_NEXT_TASKS = {
    TaskType.AWAY: {TaskType.AWAY, TaskType.LAND},
    TaskType.LAND: {TaskType.WAIT, TaskType.LOAD},
    TaskType.WAIT: {TaskType.WAIT, TaskType.LOAD},
    TaskType.LOAD: {TaskType.TAKEOFF},
    TaskType.TAKEOFF: {TaskType.AWAY},
}


@dataclass(frozen=True)
class Task:
    """A single task in an aircraft's task list.

    Attributes:
        type: The phase this task represents.
        load_percent: Percentage of capacity to load. Only meaningful for LOAD
            tasks; zero for every other type.
    """

    type: TaskType
    load_percent: int = 0

    def __post_init__(self):
        if self.load_percent < 0:
            raise ValueError("Load percentage must not be negative")

    def encode(self) -> str:
        if self.type == TaskType.LOAD:
            return f"{self.type}@{self.load_percent}"
        return str(self.type)

    def __str__(self) -> str:
        if self.type == TaskType.LOAD:
            return f"{self.type} at {self.load_percent}%"
        return str(self.type)


class TaskList:
    """A circular list of tasks followed by a single aircraft.

    The list is validated once on construction: reading it cyclically, each task
    must be allowed to follow the one before it. A list with a single task is only
    valid if that task may follow itself (AWAY or WAIT).
    """

    def __init__(self, tasks: list[Task]):
        if len(tasks) == 0:
            raise ValueError("A task list must contain at least one task")

        for index, task in enumerate(tasks):
            following = tasks[(index + 1) % len(tasks)]
            if following.type not in ALLOWED_NEXT_TASKS[task.type]:
                raise ValueError(
                    f"Task {following.type} cannot follow {task.type} in a task list"
                )

        self._tasks = list(tasks)
        self._current_task_idx = 0

    @property
    def current_task(self) -> Task:
        return self._tasks[self._current_task_idx]

    @property
    def next_task(self) -> Task:
        return self._tasks[(self._current_task_idx + 1) % len(self._tasks)]

    def move_to_next_task(self) -> None:
        """Advance to the next task, wrapping around at the end of the list."""
        self._current_task_idx = (self._current_task_idx + 1) % len(self._tasks)

    def encode(self) -> str:
        """Encode the list as comma-separated tasks, starting from the current one."""
        n = len(self._tasks)
        return ",".join(
            self._tasks[(self._current_task_idx + i) % n].encode() for i in range(n)
        )

    def __len__(self) -> int:
        return len(self._tasks)

    def __str__(self) -> str:
        return (
            f"TaskList currently on {self.current_task} "
            f"[{self._current_task_idx + 1}/{len(self._tasks)}]"
        )
