"""Diff desired worker counts against the running workers.

The diff works on multisets of queue names: a desired state of
``{"a": 2, "b": 1}`` is the goal ``[a, a, b]``, and every running worker
that matches a goal entry crosses it off. Unmatched goal entries must be
started; running workers left unmatched are surplus and must be killed.
"""

from collections import Counter
from typing import TYPE_CHECKING

from ._models import Reconciliation

if TYPE_CHECKING:
    from collections.abc import Mapping


def expand_goal(desired: "Mapping[str, int]") -> list[str]:
    """Expand desired counts into a flat list, one entry per worker.

    Non-positive counts contribute nothing.
    """
    goal: list[str] = []
    for queue, count in desired.items():
        goal.extend([queue] * max(count, 0))
    return goal


def diff[H](
    desired: "Mapping[str, int]",
    running: "Mapping[H, str]",
    max_children: int | None = None,
) -> Reconciliation[H]:
    """Compute which queues to start and which workers to kill.

    ``running`` is walked in iteration order when choosing surplus workers,
    so when several workers serve the same queue the ones that come first
    are killed first. The supervisor passes workers in spawn order, which
    makes the choice oldest-spawned-first.

    Args:
        desired: Queue name to desired worker count.
        running: Worker handle to the queue it serves.
        max_children: Capacity ceiling used for the over-capacity flag.

    Returns:
        The queues to start, the handles to kill and whether the result
        would exceed max_children once fully applied.
    """
    # Remaining running queue names not yet matched against the goal
    checklist = Counter(running.values())

    to_start: list[str] = []
    for queue in expand_goal(desired):
        if checklist[queue] > 0:
            checklist[queue] -= 1
        else:
            to_start.append(queue)

    to_kill: list[H] = []
    for handle, queue in running.items():
        if checklist[queue] > 0:
            to_kill.append(handle)
            checklist[queue] -= 1

    over_capacity = (
        max_children is not None
        and len(to_start) + len(running) - len(to_kill) > max_children
    )
    return Reconciliation(
        to_start=to_start, to_kill=to_kill, over_capacity=over_capacity
    )


def summarize(queues: "list[str]") -> str:
    """Summarize a list of queue names as ``name (count)`` pairs.

    Example:
        >>> summarize(["a", "b", "a"])
        'a (2), b (1)'
    """
    return ", ".join(f"{queue} ({count})" for queue, count in Counter(queues).items())
