# machine.py  ─────────────────────────────────────────────────────
from __future__ import annotations

from collections.abc import Iterable, Sequence

from alphabet_and_permutation import Alphabet, Permutation
from debug import Debug
from errors import ConfigError, InputFormatError, MachineSetupError
from rotor_and_reflector import Rotor


class Machine:
    """A rotor machine with NUM_ROTORS slots, PAWLS of which hold moving
    rotors.  Slot 0 is the reflector, slot NUM_ROTORS-1 the fast rotor.

    The machine owns the catalog of every available rotor; slots only
    record rotor names, so a wheel chosen again on a later settings line
    is the very same object.
    """

    def __init__(
        self,
        alphabet: Alphabet,
        num_rotors: int,
        pawls: int,
        all_rotors: Iterable[Rotor],
        *,
        debug: Debug | None = None,
    ) -> None:
        if num_rotors < 2:
            raise ConfigError(f"Need at least 2 rotor slots, got {num_rotors}")
        if not (0 <= pawls < num_rotors):
            raise ConfigError(f"Pawl count {pawls} must be in 0–{num_rotors - 1}")

        catalog: dict[str, Rotor] = {}
        for rotor in all_rotors:
            if rotor.name in catalog:
                raise ConfigError(f"Rotor {rotor.name} defined twice")
            if rotor.alphabet != alphabet:
                raise ConfigError(f"Rotor {rotor.name} uses a different alphabet")
            catalog[rotor.name] = rotor

        if len(catalog) < num_rotors:
            raise ConfigError(f"{num_rotors} slots but only {len(catalog)} rotors available")
        if sum(r.rotates() for r in catalog.values()) < pawls:
            raise ConfigError(f"Fewer moving rotors than the {pawls} pawls")
        if not any(r.reflecting() for r in catalog.values()):
            raise ConfigError("No reflector available")

        self.alphabet = alphabet
        self.debug = debug or Debug()
        self._num_rotors = num_rotors
        self._pawls = pawls
        self._catalog = catalog
        self._slots: list[str] = []
        self._plugboard = Permutation.identity(alphabet)

    # ── read-only views ──────────────────────────────────────────

    @property
    def num_rotors(self) -> int:
        return self._num_rotors

    @property
    def num_pawls(self) -> int:
        return self._pawls

    @property
    def catalog(self) -> dict[str, Rotor]:
        return dict(self._catalog)

    @property
    def slots(self) -> list[str]:
        return list(self._slots)

    def rotor(self, k: int) -> Rotor:
        """Rotor in slot K (0 = reflector)."""
        return self._catalog[self._slots[k]]

    def settings(self) -> str:
        """Window symbols of every slot but the reflector."""
        return "".join(self.rotor(i).window() for i in range(1, len(self._slots)))

    # ── key installation ─────────────────────────────────────────

    def _check_rotors(self, names: Sequence[str]) -> list[Rotor]:
        if len(names) != self._num_rotors:
            raise MachineSetupError(
                f"Expected {self._num_rotors} rotor names, got {len(names)}"
            )
        seen: set[str] = set()
        for name in names:
            if name not in self._catalog:
                raise MachineSetupError(f"Rotor {name} does not exist")
            if name in seen:
                raise MachineSetupError(f"Rotor {name} used twice")
            seen.add(name)

        chosen = [self._catalog[n] for n in names]
        first, last = chosen[0], chosen[-1]
        if not first.reflecting():
            raise MachineSetupError(f"Leftmost rotor {first.name} is not a reflector")
        if not first.permutation.derangement():
            raise MachineSetupError(f"Reflector {first.name} has a fixed point")
        if any(r.reflecting() for r in chosen[1:]):
            raise MachineSetupError("Reflector allowed in the leftmost slot only")
        if not last.rotates():
            raise MachineSetupError(f"Rightmost rotor {last.name} is not a moving rotor")
        moving = sum(r.rotates() for r in chosen)
        if moving != self._pawls:
            raise MachineSetupError(
                f"{moving} moving rotors selected for {self._pawls} pawls"
            )
        return chosen

    def _check_setting(self, setting: Sequence[str]) -> None:
        if len(setting) != self._num_rotors - 1:
            raise MachineSetupError(
                f"Setting {''.join(setting)!r} must have {self._num_rotors - 1} symbols"
            )
        for ch in setting:
            if ch not in self.alphabet:
                raise MachineSetupError(f"Setting symbol {ch!r} not in alphabet")

    def _check_plugboard(self, plugboard: Permutation | None) -> Permutation:
        if plugboard is None:
            return Permutation.identity(self.alphabet)
        if plugboard.alphabet != self.alphabet:
            raise MachineSetupError("Plugboard uses a different alphabet")
        return plugboard

    def insert_rotors(self, names: Sequence[str]) -> None:
        """Fill the slots with the rotors NAMES (reflector first), each
        at setting 0."""
        chosen = self._check_rotors(names)
        for rotor in chosen:
            rotor.set(0)
        self._slots = list(names)

    def set_rotors(self, setting: Sequence[str]) -> None:
        """Set slots 1.. from SETTING, one alphabet symbol per slot,
        leftmost first."""
        self._require_rotors()
        self._check_setting(setting)
        for slot, ch in enumerate(setting, start=1):
            self.rotor(slot).set(ch)

    @property
    def plugboard(self) -> Permutation:
        return self._plugboard

    def set_plugboard(self, plugboard: Permutation | None) -> None:
        self._plugboard = self._check_plugboard(plugboard)

    def setup(
        self,
        names: Sequence[str],
        setting: Sequence[str],
        plugboard: Permutation | None = None,
    ) -> None:
        """Install a complete message key.  Nothing changes unless the
        whole key is valid."""
        chosen = self._check_rotors(names)
        self._check_setting(setting)
        plugboard = self._check_plugboard(plugboard)

        chosen[0].set(0)
        for rotor, ch in zip(chosen[1:], setting):
            rotor.set(ch)
        self._slots = list(names)
        self._plugboard = plugboard

    # ── stepping logic  ─────────────────────────────────────────

    def _advance_rotors(self) -> None:
        """Advance rotors one key-press.  Every decision is taken from the
        positions before this key-press; the steps are applied afterwards."""
        n = len(self._slots)
        step = [False] * n

        for i in range(n - 1, 0, -1):
            right, left = self.rotor(i), self.rotor(i - 1)
            if right.at_notch() and left.rotates():
                step[i - 1] = True
                if right.rotates():
                    step[i] = True      # double step
        step[n - 1] = True
        step[0] = False

        for k in range(1, n):
            if step[k]:
                self.rotor(k).advance()

        if self.debug.active("stepping"):
            stepped = [self._slots[k] for k in range(1, n) if step[k]]
            self.debug.log("stepping", f"stepped {stepped} -> [{self.settings()}]")

    def _apply_rotors(self, c: int) -> int:
        """Send C right to left through every slot, then back out."""
        chars = self.alphabet.chars
        for i in range(len(self._slots) - 1, -1, -1):
            rotor = self.rotor(i)
            out = rotor.convert_forward(c)
            self.debug.log(
                "reflector" if i == 0 else "rotor",
                f"{rotor.name} {chars[c]} -> {chars[out]}",
            )
            c = out

        for i in range(1, len(self._slots)):
            rotor = self.rotor(i)
            out = rotor.convert_backward(c)
            self.debug.log("rotor", f"{rotor.name} {chars[c]} <- {chars[out]}")
            c = out
        return c

    # ── encipher one symbol  ────────────────────────────────────

    def convert(self, c: int) -> int:
        """Advance the machine, then convert the index C."""
        self._require_rotors()
        c = self._plugboard.wrap(c)
        self._advance_rotors()

        chars = self.alphabet.chars
        entry = self._plugboard.permute(c)
        self.debug.log("plugboard", f"in  {chars[c]} -> {chars[entry]}")

        inner = self._apply_rotors(entry)

        out = self._plugboard.permute(inner)
        self.debug.log("plugboard", f"out {chars[inner]} -> {chars[out]}")
        self.debug.log(
            "encipher",
            f"[{self.settings()}] {chars[c]} -> {chars[entry]} -> {chars[out]}",
        )
        return out

    def convert_message(self, msg: str) -> str:
        """Convert MSG symbol by symbol; spaces are copied and do not step
        the rotors."""
        self._require_rotors()
        out: list[str] = []
        for ch in msg:
            if ch == " ":
                out.append(ch)
                continue
            if ch not in self.alphabet:
                raise InputFormatError(f"Symbol {ch!r} not in alphabet")
            out.append(self.alphabet.to_char(self.convert(self.alphabet.to_int(ch))))
        return "".join(out)

    # ── helpers ──────────────────────────────────────────────────

    def _require_rotors(self) -> None:
        if not self._slots:
            raise MachineSetupError("No rotors inserted")

    def __repr__(self) -> str:
        if not self._slots:
            return f"<Machine {self._num_rotors} slots, {self._pawls} pawls, empty>"
        return f"<Machine {' '.join(self._slots)} [{self.settings()}] {self._plugboard!r}>"
