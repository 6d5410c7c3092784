"""Run a handful of blocking calls side by side and wait for all of them."""

import threading
from typing import Any, Callable, List, Optional, Sequence, Tuple

TaskOutcome = Tuple[str, Any, Optional[BaseException]]


def fan_out(tasks: Sequence[Tuple[str, Callable[[], Any]]]) -> List[TaskOutcome]:
    """Start one thread per ``(name, fn)`` task and join them all.

    Exceptions are captured per task instead of propagated, so one failing
    task never hides the others. Outcomes come back in input order as
    ``(name, result, exception)``.
    """
    outcomes: List[Optional[TaskOutcome]] = [None] * len(tasks)

    def _runner(index: int, name: str, fn: Callable[[], Any]) -> None:
        try:
            outcomes[index] = (name, fn(), None)
        except Exception as exc:
            outcomes[index] = (name, None, exc)

    threads = []
    for index, (name, fn) in enumerate(tasks):
        t = threading.Thread(
            target=_runner, args=(index, name, fn), name=f"fan-out-{name}", daemon=True
        )
        threads.append(t)
        t.start()
    for t in threads:
        t.join()
    return [o for o in outcomes if o is not None]
