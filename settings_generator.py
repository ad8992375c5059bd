# settings_generator.py
from __future__ import annotations

from random import Random, SystemRandom
from typing import List

from alphabet_and_permutation import Alphabet, Permutation
from errors import ConfigError
from rotor_and_reflector import RotorKind
from utilities import MachineConfig, RotorSpec

# ── helpers ───────────────────────────────────────────────────────


def build_rng(seed: int | None) -> Random | SystemRandom:
    """Seeded generator for repeatable key sheets, SystemRandom otherwise."""
    if seed is None:
        return SystemRandom()
    return Random(seed)


def choose_plugs(alpha: str, k: int, rng: Random | SystemRandom) -> List[str]:
    """Return up to *k* disjoint plug cycles such as ``"(AQ)"``."""
    letters = rng.sample(alpha, 2 * min(k, len(alpha) // 2))
    return [f"({a}{b})" for a, b in zip(letters[::2], letters[1::2])]


def _usable_reflector(spec: RotorSpec, alphabet: Alphabet) -> bool:
    return spec.kind is RotorKind.REFLECTING and Permutation(spec.cycles, alphabet).derangement()


# ── main API ──────────────────────────────────────────────────────


def generate_settings_line(
    cfg: MachineConfig,
    rng: Random | SystemRandom,
    max_pairs: int = 10,
) -> str:
    """Return a random ``*`` line that CFG's machine will accept."""
    alpha = cfg.alphabet
    alphabet = Alphabet(alpha)
    fixed_slots = cfg.num_rotors - cfg.pawls - 1

    reflectors = [s.name for s in cfg.rotors if _usable_reflector(s, alphabet)]
    fixed = [s.name for s in cfg.rotors if s.kind is RotorKind.FIXED]
    moving = [s.name for s in cfg.rotors if s.kind is RotorKind.MOVING]

    if not reflectors:
        raise ConfigError("No usable reflector in configuration")
    if len(fixed) < fixed_slots:
        raise ConfigError(f"Need {fixed_slots} fixed rotors, configuration has {len(fixed)}")
    if len(moving) < cfg.pawls or cfg.pawls < 1:
        raise ConfigError(f"Need {max(cfg.pawls, 1)} moving rotors, configuration has {len(moving)}")

    names = (
        [rng.choice(reflectors)]
        + rng.sample(fixed, fixed_slots)
        + rng.sample(moving, cfg.pawls)
    )
    setting = "".join(rng.choices(alpha, k=cfg.num_rotors - 1))
    plugs = choose_plugs(alpha, max_pairs, rng)

    return " ".join(["*", *names, setting, *plugs])


def generate_key_sheet(
    cfg: MachineConfig,
    count: int,
    seed: int | None = None,
    max_pairs: int = 10,
) -> List[str]:
    rng = build_rng(seed)
    return [generate_settings_line(cfg, rng, max_pairs) for _ in range(count)]
