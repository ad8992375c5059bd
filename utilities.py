# utilities.py
from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple

from alphabet_and_permutation import Alpha26, Alphabet, Permutation, parse_cycles, wiring_to_cycles
from debug import Debug
from errors import ConfigError, InputFormatError, MachineSetupError
from machine import Machine
from rotor_and_reflector import Rotor, RotorKind

# ────────────────────────────────────────────────────────────────────────
#  0. Structured records
# ────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class RotorSpec:
    """One catalog entry, as read from a configuration."""

    name: str
    kind: RotorKind
    notches: str = ""
    cycles: List[str] = field(default_factory=list)

    @property
    def tag(self) -> str:
        return self.kind.value + self.notches


@dataclass(slots=True)
class MachineConfig:
    alphabet: str
    num_rotors: int
    pawls: int
    rotors: List[RotorSpec] = field(default_factory=list)


@dataclass(slots=True)
class SettingsLine:
    """A parsed ``*`` message-key line."""

    rotors: List[str]
    setting: str
    plugboard: str = ""


# ────────────────────────────────────────────────────────────────────────
#  1. Configuration readers & writers
# ────────────────────────────────────────────────────────────────────────


def read_config(text: str) -> MachineConfig:
    """Parse the text configuration format::

        ABCDEFGHIJKLMNOPQRSTUVWXYZ
        5 3
        I MQ (AELTPHQXRU) (BKNW) ...
        B R  (AE) (BN) ...
    """
    alpha_line, _, rest = text.lstrip("\n").partition("\n")
    alpha = alpha_line.strip()
    if not alpha:
        raise ConfigError("configuration file truncated")

    tokens = rest.split()
    if len(tokens) < 2:
        raise ConfigError("configuration file truncated")
    try:
        num_rotors, pawls = int(tokens[0]), int(tokens[1])
    except ValueError:
        raise ConfigError(f"Bad rotor/pawl counts: {tokens[0]!r} {tokens[1]!r}") from None

    specs: List[RotorSpec] = []
    pos = 2
    while pos < len(tokens):
        name = tokens[pos]
        if name.startswith("("):
            raise ConfigError(f"bad rotor description near {name!r}")
        if pos + 1 >= len(tokens):
            raise ConfigError(f"bad rotor description for {name}")
        tag = tokens[pos + 1]
        pos += 2

        body = []
        while pos < len(tokens) and tokens[pos].startswith("("):
            body.append(tokens[pos])
            pos += 1

        kind = RotorKind.from_tag(tag[0])
        specs.append(RotorSpec(name, kind, tag[1:], parse_cycles("".join(body))))

    return MachineConfig(alpha, num_rotors, pawls, specs)


def format_config(cfg: MachineConfig) -> str:
    """Render CFG back to the text configuration format."""
    width = max((len(s.name) for s in cfg.rotors), default=0)
    tag_w = max((len(s.tag) for s in cfg.rotors), default=0)
    lines = [cfg.alphabet, f"{cfg.num_rotors} {cfg.pawls}"]
    for spec in cfg.rotors:
        cycles = " ".join(f"({c})" for c in spec.cycles)
        lines.append(f"{spec.name:<{width}} {spec.tag:<{tag_w}} {cycles}".rstrip())
    return "\n".join(lines) + "\n"


_TYPE_NAMES = {"moving": "M", "fixed": "N", "reflecting": "R", "reflector": "R"}


def _expect(value, kind: type, what: str):
    if not isinstance(value, kind) or isinstance(value, bool):
        raise ConfigError(f"{what} must be a {kind.__name__}, got {value!r}")
    return value


def load_json_config(path: str | Path) -> MachineConfig:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Bad JSON in {path}: {exc}") from None
    _expect(data, dict, f"{path}: top level")
    required = {"alphabet", "rotors", "pawls", "wheels"}
    missing = required - data.keys()
    if missing:
        raise ConfigError(f"Missing keys in config: {', '.join(sorted(missing))}")

    alphabet = Alphabet(_expect(data["alphabet"], str, "alphabet"))
    num_rotors = _expect(data["rotors"], int, "rotors")
    pawls = _expect(data["pawls"], int, "pawls")

    specs: List[RotorSpec] = []
    for wheel in _expect(data["wheels"], list, "wheels"):
        _expect(wheel, dict, "wheel entry")
        try:
            name, type_tag = wheel["name"], wheel["type"]
        except KeyError as exc:
            raise ConfigError(f"Wheel entry missing {exc.args[0]!r}") from None
        _expect(name, str, "wheel name")
        _expect(type_tag, str, f"type of {name}")
        notches = _expect(wheel.get("notches", ""), str, f"notches of {name}")
        if "wiring" in wheel:
            cycles = wiring_to_cycles(_expect(wheel["wiring"], str, f"wiring of {name}"), alphabet)
        else:
            cycles = parse_cycles(_expect(wheel.get("cycles", ""), str, f"cycles of {name}"))
        kind = RotorKind.from_tag(_TYPE_NAMES.get(type_tag.lower(), type_tag))
        specs.append(RotorSpec(name, kind, notches, cycles))

    return MachineConfig(alphabet.chars, num_rotors, pawls, specs)


def load_config(path: str | Path) -> MachineConfig:
    """Read PATH as JSON when it ends in ``.json``, as text otherwise."""
    path = Path(path)
    if path.suffix.lower() == ".json":
        return load_json_config(path)
    return read_config(path.read_text(encoding="utf-8"))


def build_machine(cfg: MachineConfig, debug: Debug | None = None) -> Machine:
    alphabet = Alphabet(cfg.alphabet)
    rotors = [
        Rotor(spec.name, Permutation(spec.cycles, alphabet), spec.kind, spec.notches)
        for spec in cfg.rotors
    ]
    if debug is not None:
        debug.log("config", f"{len(rotors)} rotors over {cfg.alphabet!r}, "
                            f"{cfg.num_rotors} slots, {cfg.pawls} pawls")
    return Machine(alphabet, cfg.num_rotors, cfg.pawls, rotors, debug=debug)


# ────────────────────────────────────────────────────────────────────────
#  2. Message-key lines & message stream
# ────────────────────────────────────────────────────────────────────────


def is_settings_line(line: str) -> bool:
    return line.lstrip().startswith("*")


def parse_settings_line(line: str, num_rotors: int) -> SettingsLine:
    """``* B Beta III IV I AXLE (HQ) (EX)`` → SettingsLine."""
    if not is_settings_line(line):
        raise InputFormatError(f"Settings line must start with '*': {line!r}")

    tokens = line.lstrip()[1:].split()
    if len(tokens) < num_rotors + 1:
        raise MachineSetupError(
            f"Settings line needs {num_rotors} rotor names and a setting: {line.strip()!r}"
        )
    names = tokens[:num_rotors]
    setting = tokens[num_rotors]
    plugs = "".join(tokens[num_rotors + 1:])
    return SettingsLine(names, setting, plugs)


def apply_settings(machine: Machine, settings: SettingsLine) -> None:
    plugboard = Permutation.from_notation(settings.plugboard, machine.alphabet)
    machine.setup(settings.rotors, settings.setting, plugboard)


def format_message_line(msg: str, block: int = 5) -> str:
    """Drop spaces and regroup MSG in blocks of BLOCK symbols."""
    text = msg.replace(" ", "")
    if block <= 0:
        return text
    return " ".join(text[i : i + block] for i in range(0, len(text), block))


def process_lines(machine: Machine, lines: Iterable[str], block: int = 5) -> Iterator[str]:
    """Yield one output line per input line.  The stream must open with a
    settings line; blank lines pass through."""
    configured = False
    for raw in lines:
        line = raw.rstrip("\r\n")
        if not line.strip():
            yield ""
            continue
        if is_settings_line(line):
            apply_settings(machine, parse_settings_line(line, machine.num_rotors))
            configured = True
            continue
        if not configured:
            raise InputFormatError("Input does not start with a settings line")
        yield format_message_line(machine.convert_message(line.strip()), block)


# ────────────────────────────────────────────────────────────────────────
#  3. Wheel database
# ────────────────────────────────────────────────────────────────────────

# name: (kind, notches, wiring over Alpha26)
LEGACY_WHEELS: Dict[str, Tuple[RotorKind, str, str]] = {
    "I":     (RotorKind.MOVING, "Q",  "EKMFLGDQVZNTOWYHXUSPAIBRCJ"),
    "II":    (RotorKind.MOVING, "E",  "AJDKSIRUXBLHWTMCQGZNPYFVOE"),
    "III":   (RotorKind.MOVING, "V",  "BDFHJLCPRTXVZNYEIWGAKMUSQO"),
    "IV":    (RotorKind.MOVING, "J",  "ESOVPZJAYQUIRHXLNFTGKDCMWB"),
    "V":     (RotorKind.MOVING, "Z",  "VZBRGITYUPSDNHLXAWMJQOFECK"),
    "VI":    (RotorKind.MOVING, "ZM", "JPGVOUMFYQBENHZRDKASXLICTW"),
    "VII":   (RotorKind.MOVING, "ZM", "NZJHGRCXMYSWBOUFAIVLPEKQDT"),
    "VIII":  (RotorKind.MOVING, "ZM", "FKQHTLXOCBJSPDZRAMEWNIUYGV"),
    "Beta":  (RotorKind.FIXED,  "",   "LEYJVCNIXWPBQMDRTAKZGFUHOS"),
    "Gamma": (RotorKind.FIXED,  "",   "FSOKANUERHMBTIYCWLQPZXVGJD"),
    "A":     (RotorKind.REFLECTING, "", "EJMZALYXVBWFCRQUONTSPIKHGD"),
    "B":     (RotorKind.REFLECTING, "", "YRUHQSLDPXNGOKMIEBFZCWVJAT"),
    "C":     (RotorKind.REFLECTING, "", "FVPJIAOYEDRZXWGCTKUQSBNMHL"),
    "B-thin": (RotorKind.REFLECTING, "", "ENKQAUYWJICOPBLMDXZVFTHRGS"),
    "C-thin": (RotorKind.REFLECTING, "", "RDOBJNTKVEHMLFCWZAXGYIPSUQ"),
}


def legacy_config(num_rotors: int = 5, pawls: int = 3) -> MachineConfig:
    """Configuration holding every historical wheel over A–Z."""
    alphabet = Alphabet(Alpha26)
    specs = [
        RotorSpec(name, kind, notches, wiring_to_cycles(wiring, alphabet))
        for name, (kind, notches, wiring) in LEGACY_WHEELS.items()
    ]
    return MachineConfig(Alpha26, num_rotors, pawls, specs)


__all__ = [
    "RotorSpec",
    "MachineConfig",
    "SettingsLine",
    "read_config",
    "format_config",
    "load_json_config",
    "load_config",
    "build_machine",
    "is_settings_line",
    "parse_settings_line",
    "apply_settings",
    "format_message_line",
    "process_lines",
    "LEGACY_WHEELS",
    "legacy_config",
]
