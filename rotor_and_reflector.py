# rotor_and_reflector.py
from __future__ import annotations

from enum import Enum

from alphabet_and_permutation import Alphabet, Permutation
from errors import ConfigError, MachineSetupError


class RotorKind(Enum):
    """Rotor variants, valued by their configuration tag."""

    MOVING = "M"
    FIXED = "N"
    REFLECTING = "R"

    @classmethod
    def from_tag(cls, tag: str) -> "RotorKind":
        try:
            return cls(tag)
        except ValueError:
            raise ConfigError(f"Unknown rotor type {tag!r}") from None


class Rotor:
    """One wheel: a wiring permutation plus a rotational setting.

    All three variants share this record; behaviour that differs between
    them (stepping, notches, settability) is selected by ``kind``.
    """

    def __init__(
        self,
        name: str,
        permutation: Permutation,
        kind: RotorKind = RotorKind.FIXED,
        notches: str = "",
    ) -> None:
        if kind is RotorKind.MOVING and not notches:
            raise ConfigError(f"Moving rotor {name} needs at least one notch")
        if kind is not RotorKind.MOVING and notches:
            raise ConfigError(f"Only moving rotors carry notches ({name})")
        if not set(notches) <= set(permutation.alphabet.chars):
            raise ConfigError(f"Notch characters of {name} must be in the alphabet")

        self.name = name
        self.permutation = permutation
        self.kind = kind
        self.notches = frozenset(notches)
        self.setting = 0

    @property
    def alphabet(self) -> Alphabet:
        return self.permutation.alphabet

    def size(self) -> int:
        return self.permutation.size()

    # ── capabilities ─────────────────────────────────────────────
    def rotates(self) -> bool:
        return self.kind is RotorKind.MOVING

    def reflecting(self) -> bool:
        return self.kind is RotorKind.REFLECTING

    # ── setting & stepping ───────────────────────────────────────
    def set(self, posn: int | str) -> None:
        """Rotate to POSN, given either as an index or as a window symbol."""
        if isinstance(posn, str):
            if posn not in self.alphabet:
                raise MachineSetupError(f"Setting {posn!r} for {self.name} not in alphabet")
            posn = self.alphabet.to_int(posn)
        posn = self.permutation.wrap(posn)
        if self.reflecting() and posn != 0:
            raise MachineSetupError(f"Reflector {self.name} has only one position")
        self.setting = posn

    def window(self) -> str:
        return self.alphabet.chars[self.setting]

    def at_notch(self) -> bool:
        return self.rotates() and self.window() in self.notches

    def advance(self) -> None:
        # fixed wheels and reflectors have no pawl: nothing to do
        if self.rotates():
            self.setting = (self.setting + 1) % self.size()

    # ── signal paths ---------------------------------------------
    def convert_forward(self, sig: int) -> int:
        shift = self.permutation.wrap(sig + self.setting)
        mapped = self.permutation.permute(shift)
        return self.permutation.wrap(mapped - self.setting)

    def convert_backward(self, sig: int) -> int:
        shift = self.permutation.wrap(sig + self.setting)
        mapped = self.permutation.invert(shift)
        return self.permutation.wrap(mapped - self.setting)

    # ── niceties --------------------------------------------------
    def __repr__(self) -> str:
        notch = "".join(sorted(self.notches))
        tag = self.kind.value + notch
        return f"<Rotor {self.name} {tag} pos={self.window()}>"


def moving_rotor(name: str, perm: Permutation, notches: str) -> Rotor:
    return Rotor(name, perm, RotorKind.MOVING, notches)


def fixed_rotor(name: str, perm: Permutation) -> Rotor:
    return Rotor(name, perm, RotorKind.FIXED)


def reflector(name: str, perm: Permutation) -> Rotor:
    return Rotor(name, perm, RotorKind.REFLECTING)
