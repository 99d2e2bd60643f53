from __future__ import annotations

import argparse
import shlex
import sys
from typing import Callable, Dict, List, Sequence, Tuple

from constants import PAGE_COUNT, PAGE_SIZE
from ptsim.errors import OOMError, PtSimError
from ptsim.machine import Machine, MachineConfig

from ptshell.shell_env import ShellEnv, _parse_int

try:
    import readline  # type: ignore
except ImportError:
    readline = None

FREE_MAP_WIDTH = 16


def render_free_map(free_map: Sequence[bool], *, width: int = FREE_MAP_WIDTH) -> List[str]:
    lines = ["--- PAGE FREE MAP ---"]
    for i in range(0, len(free_map), width):
        lines.append("".join("#" if used else "." for used in free_map[i : i + width]))
    return lines


def render_page_table(proc_id: int, mappings: Sequence[Tuple[int, int]]) -> List[str]:
    lines = [f"--- PROCESS {proc_id} PAGE TABLE ---"]
    for vpn, page in mappings:
        lines.append(f"{vpn:02x} -> {page:02x}")
    return lines


def _cmd_help() -> None:
    print("commands:")
    print("  np <proc> <pages>        new process with <pages> data pages")
    print("  kp <proc>                kill process")
    print("  pfm                      print page free map")
    print("  ppt <proc>               print process page table")
    print("  sb <proc> <vaddr> <val>  store byte")
    print("  lb <proc> <vaddr>        load byte")
    print("  help")
    print("  exit")


def _cmd_np(env: ShellEnv, proc_id: int, pages: int) -> None:
    try:
        env.m.new_process(proc_id, pages)
    except OOMError as e:
        print(f"OOM: proc {e.proc_id}: {e.kind.label}")
        env.status = 1


def _cmd_kp(env: ShellEnv, proc_id: int) -> None:
    env.m.kill_process(proc_id)


def _cmd_pfm(env: ShellEnv) -> None:
    for line in render_free_map(env.m.free_map()):
        print(line)


def _cmd_ppt(env: ShellEnv, proc_id: int) -> None:
    for line in render_page_table(proc_id, env.m.page_table(proc_id)):
        print(line)


def _cmd_sb(env: ShellEnv, proc_id: int, virt_addr: int, value: int) -> None:
    print(env.m.store(proc_id, virt_addr, value).format())


def _cmd_lb(env: ShellEnv, proc_id: int, virt_addr: int) -> None:
    print(env.m.load(proc_id, virt_addr).format())


# name -> (handler, arg names)
COMMANDS: Dict[str, Tuple[Callable[..., None], Tuple[str, ...]]] = {
    "np": (_cmd_np, ("proc", "pages")),
    "kp": (_cmd_kp, ("proc",)),
    "pfm": (_cmd_pfm, ()),
    "ppt": (_cmd_ppt, ("proc",)),
    "sb": (_cmd_sb, ("proc", "vaddr", "val")),
    "lb": (_cmd_lb, ("proc", "vaddr")),
}


def _usage(cmd: str) -> str:
    _, names = COMMANDS[cmd]
    return " ".join([cmd, *(f"<{n}>" for n in names)])


def run_commands(env: ShellEnv, tokens: Sequence[str]) -> int:
    """Run a flat token stream such as ``np 1 2 pfm ppt 1``.

    Each command consumes its own fixed number of arguments. A malformed
    command stops the run; an engine error only fails that command.
    """
    i = 0
    while i < len(tokens):
        cmd = tokens[i]
        i += 1
        entry = COMMANDS.get(cmd)
        if entry is None:
            print(f"unknown command: {cmd}")
            return 2
        fn, names = entry
        raw = list(tokens[i : i + len(names)])
        i += len(names)
        if len(raw) < len(names):
            print(f"{cmd}: usage: {_usage(cmd)}")
            return 2
        args = [_parse_int(a) for a in raw]
        if any(a is None for a in args):
            print(f"{cmd}: invalid integer argument")
            return 2
        try:
            fn(env, *args)
        except PtSimError as e:
            print(f"{cmd}: {e}")
            env.status = 1
    return env.status


def _dispatch_host_command(env: ShellEnv, parts: Sequence[str]) -> bool:
    if not parts:
        return True
    cmd = parts[0]
    if cmd in ("exit", "quit"):
        return False
    if cmd == "help":
        _cmd_help()
        return True
    run_commands(env, parts)
    return True


def _read_host_line() -> str | None:
    try:
        return input("ptsim$ ")
    except EOFError:
        print()
        return None
    except KeyboardInterrupt:
        print()
        return ""


def repl(env: ShellEnv) -> None:
    _cmd_help()
    while True:
        line = _read_host_line()
        if line is None:
            return
        try:
            parts = shlex.split(line)
        except ValueError as e:
            print(f"parse error: {e}")
            continue
        if not _dispatch_host_command(env, parts):
            return


def _make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ptsim", description="Single-level page table simulator")
    parser.add_argument("--page-size", type=int, default=PAGE_SIZE, help=f"bytes per page (default {PAGE_SIZE})")
    parser.add_argument("--page-count", type=int, default=PAGE_COUNT, help=f"physical pages (default {PAGE_COUNT})")
    parser.add_argument("-i", "--interactive", action="store_true", help="read commands from a prompt")
    parser.add_argument("commands", nargs=argparse.REMAINDER, help="e.g. np 1 2 pfm ppt 1")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _make_parser()
    ns = parser.parse_args(argv)
    try:
        config = MachineConfig(page_size=ns.page_size, page_count=ns.page_count)
    except ValueError as e:
        parser.error(str(e))
    env = ShellEnv(m=Machine(config))

    if ns.interactive:
        repl(env)
        return env.status
    if not ns.commands:
        print("usage: ptsim commands", file=sys.stderr)
        return 1
    return run_commands(env, ns.commands)


if __name__ == "__main__":
    sys.exit(main())
