from __future__ import annotations

from dataclasses import dataclass

from ptsim.machine import Machine


@dataclass(slots=True)
class ShellEnv:
    m: Machine
    status: int = 0


def _parse_int(text: str) -> int | None:
    try:
        return int(text, 10)
    except ValueError:
        return None
