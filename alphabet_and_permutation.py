# alphabet_and_permutation.py
from __future__ import annotations

import re
from collections.abc import Iterable

from errors import ConfigError, EnigmaError, PermutationError

Alpha26 = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

_cycle_re = re.compile(r"\(([^()]*)\)")


# ── Alphabet ──────────────────────────────────────────────────────
class Alphabet:
    """Ordered, duplicate-free symbol set with a symbol <-> index bijection."""

    def __init__(self, chars: str = Alpha26) -> None:
        if not chars:
            raise ConfigError("Alphabet must contain at least one symbol")

        index: dict[str, int] = {}
        for i, ch in enumerate(chars):
            if ch.isspace() or ch in "()":
                raise ConfigError(f"Symbol {ch!r} cannot be used in an alphabet")
            if ch in index:
                raise ConfigError(f"Symbol {ch!r} repeated in alphabet")
            index[ch] = i

        self.chars: str = chars
        self._index = index

    def size(self) -> int:
        return len(self.chars)

    __len__ = size

    def __contains__(self, ch: object) -> bool:
        return ch in self._index

    # symbol → integer index
    def to_int(self, ch: str) -> int:
        try:
            return self._index[ch]
        except KeyError:
            raise EnigmaError(f"Symbol {ch!r} not in alphabet") from None

    # integer index → symbol
    def to_char(self, index: int) -> str:
        if not (0 <= index < len(self.chars)):
            hi = len(self.chars) - 1
            raise EnigmaError(f"Index {index} out of range 0–{hi}")
        return self.chars[index]

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Alphabet) and other.chars == self.chars

    def __hash__(self) -> int:
        return hash(self.chars)

    def __repr__(self) -> str:
        return f"<Alphabet {self.chars!r}>"


# ── cycle notation helpers ────────────────────────────────────────
def parse_cycles(text: str) -> list[str]:
    """Split ``"(ABC) (DE)"`` into ``["ABC", "DE"]``.

    Cycles may be separated by whitespace or written back to back.  Anything
    outside a parenthesised group other than whitespace is rejected, as is
    whitespace inside a group.  Empty groups are dropped.
    """
    leftover = _cycle_re.sub(" ", text)
    if leftover.strip():
        raise PermutationError(f"Malformed cycle notation: {text!r}")

    cycles = []
    for body in _cycle_re.findall(text):
        if any(ch.isspace() for ch in body):
            raise PermutationError(f"Whitespace inside cycle ({body})")
        if body:
            cycles.append(body)
    return cycles


def wiring_to_cycles(wiring: str, alphabet: Alphabet) -> list[str]:
    """Convert a substitution string (image of each alphabet symbol, in
    alphabet order) to cycle notation.  Fixed points are left implicit."""
    if sorted(wiring) != sorted(alphabet.chars):
        raise PermutationError("wiring must be a permutation of alphabet")

    fwd = [alphabet.to_int(c) for c in wiring]
    seen = [False] * len(fwd)
    cycles: list[str] = []
    for start in range(len(fwd)):
        if seen[start] or fwd[start] == start:
            seen[start] = True
            continue
        run = []
        i = start
        while not seen[i]:
            seen[i] = True
            run.append(alphabet.chars[i])
            i = fwd[i]
        cycles.append("".join(run))
    return cycles


# ── Permutation ───────────────────────────────────────────────────
class Permutation:
    """A permutation of ``0..N-1`` given in cycle notation over an alphabet.

    Symbols that appear in no cycle map to themselves.  Whether the
    permutation is a derangement is decided once, here, from the complete
    set of fixed points.
    """

    def __init__(self, cycles: Iterable[str], alphabet: Alphabet) -> None:
        self.alphabet = alphabet
        size = alphabet.size()

        # integer lookup tables
        self._fwd = list(range(size))
        self._rev = list(range(size))

        kept: list[str] = []
        used: set[str] = set()
        for cycle in cycles:
            if not cycle:
                continue
            for ch in cycle:
                if ch.isspace():
                    raise PermutationError(f"Whitespace inside cycle ({cycle})")
                if ch not in alphabet:
                    raise PermutationError(f"Symbol {ch!r} in cycle ({cycle}) not in alphabet")
                if ch in used:
                    raise PermutationError(f"Symbol {ch!r} repeated in cycle notation")
                used.add(ch)

            for here, there in zip(cycle, cycle[1:] + cycle[0]):
                a, b = alphabet.to_int(here), alphabet.to_int(there)
                self._fwd[a] = b
                self._rev[b] = a
            kept.append(cycle)

        self.cycles: tuple[str, ...] = tuple(kept)
        self._derangement = all(self._fwd[i] != i for i in range(size))

    @classmethod
    def from_notation(cls, text: str, alphabet: Alphabet) -> "Permutation":
        return cls(parse_cycles(text), alphabet)

    @classmethod
    def from_wiring(cls, wiring: str, alphabet: Alphabet) -> "Permutation":
        return cls(wiring_to_cycles(wiring, alphabet), alphabet)

    @classmethod
    def identity(cls, alphabet: Alphabet) -> "Permutation":
        return cls((), alphabet)

    def size(self) -> int:
        return self.alphabet.size()

    def wrap(self, p: int) -> int:
        """Return P modulo the size of this permutation."""
        return p % self.size()

    # ── index-typed mapping ───────────────────────────────────────
    def permute(self, p: int) -> int:
        return self._fwd[self.wrap(p)]

    def invert(self, c: int) -> int:
        return self._rev[self.wrap(c)]

    # ── symbol-typed mapping ──────────────────────────────────────
    def permute_char(self, ch: str) -> str:
        return self.alphabet.to_char(self.permute(self.alphabet.to_int(ch)))

    def invert_char(self, ch: str) -> str:
        return self.alphabet.to_char(self.invert(self.alphabet.to_int(ch)))

    def derangement(self) -> bool:
        """True iff no symbol maps to itself."""
        return self._derangement

    def notation(self) -> str:
        return " ".join(f"({c})" for c in self.cycles)

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, Permutation)
            and other.alphabet == self.alphabet
            and other._fwd == self._fwd
        )

    def __repr__(self) -> str:
        return f"<Permutation {self.notation() or '()'}>"
