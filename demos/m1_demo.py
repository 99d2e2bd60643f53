from __future__ import annotations

from ptsim.errors import OOMError, UnknownProcessError
from ptsim.machine import Machine
from ptshell.shell_host import render_free_map, render_page_table


def main() -> None:
    m = Machine()

    # 1) np 1 2 -> page table page plus two data pages
    m.new_process(1, 2)
    mappings = m.page_table(1)
    assert [vpn for vpn, _ in mappings] == [0, 1]
    assert len({page for _, page in mappings}) == 2
    for line in render_page_table(1, mappings):
        print(line)

    # 2) a process with no data pages still owns its page table
    m.new_process(0, 0)
    assert m.page_table(0) == []

    # 3) run out of memory, state stays consistent
    used_before = sum(m.free_map())
    try:
        m.new_process(2, 64)
        raise AssertionError("expected OOMError")
    except OOMError as e:
        print(f"OOM: proc {e.proc_id}: {e.kind.label}")
    assert sum(m.free_map()) == used_before

    # 4) kill releases everything and forgets the process
    m.kill_process(1)
    try:
        m.page_table(1)
        raise AssertionError("expected UnknownProcessError")
    except UnknownProcessError:
        pass

    for line in render_free_map(m.free_map()):
        print(line)
    print("M1 demo ok")


if __name__ == "__main__":
    main()
