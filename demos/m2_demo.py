from __future__ import annotations

from constants import PAGE_SIZE
from ptsim.errors import PageFault
from ptsim.machine import Machine


def main() -> None:
    m = Machine(trace=lambda rec: print(rec.format()))
    m.new_process(1, 2)
    m.new_process(2, 2)

    # 1) same virtual address, different physical bytes
    m.store(1, PAGE_SIZE + 3, 0xAB)
    m.store(2, PAGE_SIZE + 3, 0xCD)
    assert m.load(1, PAGE_SIZE + 3).value == 0xAB
    assert m.load(2, PAGE_SIZE + 3).value == 0xCD
    assert m.translate(1, PAGE_SIZE + 3) != m.translate(2, PAGE_SIZE + 3)

    # 2) values are stored as one byte
    assert m.store(1, 0, 0x1FF).value == 0xFF

    # 3) a virtual page past the mapped range faults
    try:
        m.load(1, 2 * PAGE_SIZE)
        raise AssertionError("expected PageFault")
    except PageFault:
        pass

    print("M2 demo ok")


if __name__ == "__main__":
    main()
