from collections import Counter

from hypothesis import given, strategies as st

from sliders.supervisor import diff, expand_goal

queue_names = st.sampled_from(["mail", "video", "reports", "cache"])
desired_states = st.dictionaries(queue_names, st.integers(min_value=-2, max_value=5))
running_lists = st.lists(queue_names, max_size=15)


def as_running(queues: list[str]) -> dict[int, str]:
    return {1000 + i: queue for i, queue in enumerate(queues)}


@given(desired=desired_states, queues=running_lists)
def test_applying_diff_reaches_goal(desired: dict[str, int], queues: list[str]) -> None:
    running = as_running(queues)

    result = diff(desired, running)
    survivors = [q for pid, q in running.items() if pid not in result.to_kill]

    assert Counter(survivors) + Counter(result.to_start) == Counter(expand_goal(desired))


@given(desired=desired_states, queues=running_lists)
def test_diff_bounds(desired: dict[str, int], queues: list[str]) -> None:
    running = as_running(queues)

    result = diff(desired, running)

    assert len(result.to_kill) <= len(running)
    assert len(set(result.to_kill)) == len(result.to_kill)
    assert len(result.to_start) <= sum(max(c, 0) for c in desired.values())


@given(desired=desired_states, queues=running_lists)
def test_diff_never_starts_and_kills_same_queue(
    desired: dict[str, int], queues: list[str]
) -> None:
    running = as_running(queues)

    result = diff(desired, running)

    killed = {running[pid] for pid in result.to_kill}
    assert killed.isdisjoint(result.to_start)


@given(desired=desired_states, queues=running_lists)
def test_diff_is_idempotent(desired: dict[str, int], queues: list[str]) -> None:
    running = as_running(queues)
    first = diff(desired, running)
    after = {pid: q for pid, q in running.items() if pid not in first.to_kill}
    after |= {5000 + i: q for i, q in enumerate(first.to_start)}

    assert diff(desired, after).is_empty


@given(desired=desired_states, queues=running_lists)
def test_surplus_killed_in_running_order(
    desired: dict[str, int], queues: list[str]
) -> None:
    running = as_running(queues)

    result = diff(desired, running)

    for queue in set(queues):
        pids = [pid for pid, q in running.items() if q == queue]
        killed = [pid for pid in result.to_kill if running[pid] == queue]
        assert killed == pids[: len(killed)]


@given(
    desired=desired_states,
    queues=running_lists,
    max_children=st.integers(min_value=1, max_value=10),
)
def test_over_capacity_flag(
    desired: dict[str, int], queues: list[str], max_children: int
) -> None:
    result = diff(desired, as_running(queues), max_children)

    goal_size = len(expand_goal(desired))
    assert result.over_capacity == (goal_size > max_children)
