# main.py
from __future__ import annotations

import argparse
import sys
from contextlib import ExitStack
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, TextIO

from debug import COMPONENTS, Debug
from errors import EnigmaError
from settings_generator import generate_key_sheet
from utilities import (
    MachineConfig,
    build_machine,
    format_config,
    legacy_config,
    load_config,
    process_lines,
)

# ────────────────────────────────────────────────────────────────────────
#  0. Configuration
# ────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class Config:
    """Runtime switches of the command line front end."""

    block: int = 5                  # output group size
    verbose: bool = False           # per-symbol trace on stderr
    trace: List[str] = field(default_factory=list)

    def make_debug(self, log_to: str | None = None) -> Debug:
        components = list(self.trace)
        if self.verbose:
            components.append("encipher")
        debug = Debug(enabled=bool(components), log_to=log_to)
        debug.enable(*components)
        return debug


# ────────────────────────────────────────────────────────────────────────
#  1. CLI helpers
# ────────────────────────────────────────────────────────────────────────


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="enigma", description="Encrypt or decrypt with a rotor machine")
    src = p.add_mutually_exclusive_group(required=True)
    src.add_argument("-c", "--config", metavar="FILE", help="Machine configuration (text, or JSON when the name ends in .json).")
    src.add_argument("--legacy", action="store_true", help="Use the built-in historical wheels over A-Z.")
    p.add_argument("--slots", type=int, default=5, help="Rotor slots for --legacy. Default: 5")
    p.add_argument("--pawls", type=int, default=3, help="Pawls for --legacy. Default: 3")

    p.add_argument("-i", "--input", metavar="FILE", help="Messages to process. Default: standard input")
    p.add_argument("-o", "--output", metavar="FILE", help="Where to write results. Default: standard output")
    p.add_argument("--block", type=int, default=5, help="Output group size, 0 for none. Default: 5")

    p.add_argument("-v", "--verbose", action="store_true", help="Trace every converted symbol on stderr.")
    p.add_argument("--trace", nargs="+", default=[], choices=COMPONENTS, metavar="COMPONENT", help=f"Extra diagnostics: {', '.join(COMPONENTS)}")
    p.add_argument("--log-file", metavar="FILE", help="Also write diagnostics to FILE.")

    p.add_argument("--generate", type=int, metavar="N", help="Print N random settings lines instead of converting.")
    p.add_argument("--seed", type=int, help="Deterministic seed for --generate")
    p.add_argument("--dump-config", action="store_true", help="Print the configuration in text form and exit.")
    return p.parse_args(argv)


def _machine_config(args: argparse.Namespace) -> MachineConfig:
    if args.legacy:
        return legacy_config(args.slots, args.pawls)
    return load_config(args.config)


def run(args: argparse.Namespace, stdin: TextIO, stdout: TextIO) -> None:
    cfg = Config(block=args.block, verbose=args.verbose, trace=args.trace)
    machine_cfg = _machine_config(args)

    with ExitStack() as stack:
        out = stdout
        if args.output:
            out = stack.enter_context(Path(args.output).open("w", encoding="utf-8"))

        if args.dump_config:
            out.write(format_config(machine_cfg))
            return
        if args.generate is not None:
            for line in generate_key_sheet(machine_cfg, args.generate, args.seed):
                print(line, file=out)
            return

        machine = build_machine(machine_cfg, cfg.make_debug(args.log_file))
        src = stdin
        if args.input:
            src = stack.enter_context(Path(args.input).open(encoding="utf-8"))
        for line in process_lines(machine, src, cfg.block):
            print(line, file=out)


# ────────────────────────────────────────────────────────────────────────
#  2. Main entry point
# ────────────────────────────────────────────────────────────────────────


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        run(args, sys.stdin, sys.stdout)
    except EnigmaError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Error: could not open {exc.filename}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
