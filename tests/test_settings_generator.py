import unittest
from random import Random

from errors import ConfigError
from rotor_and_reflector import RotorKind
from settings_generator import build_rng, choose_plugs, generate_key_sheet, generate_settings_line
from utilities import MachineConfig, RotorSpec, apply_settings, build_machine, legacy_config, parse_settings_line


class TestSettingsGenerator(unittest.TestCase):
    def test_seeded_sheets_repeat(self) -> None:
        cfg = legacy_config()
        self.assertEqual(generate_key_sheet(cfg, 4, seed=7), generate_key_sheet(cfg, 4, seed=7))

    def test_lines_install_and_round_trip(self) -> None:
        cfg = legacy_config(5, 3)
        machine = build_machine(cfg)
        for line in generate_key_sheet(cfg, 10, seed=2024):
            key = parse_settings_line(line, cfg.num_rotors)
            apply_settings(machine, key)
            cipher = machine.convert_message("WEATHER REPORT")
            apply_settings(machine, key)
            self.assertEqual(machine.convert_message(cipher), "WEATHER REPORT")

    def test_choose_plugs_disjoint(self) -> None:
        plugs = choose_plugs("ABCDEFGHIJ", 8, Random(1))
        self.assertEqual(len(plugs), 5)
        self.assertTrue(all(len(p) == 4 and p[0] == "(" and p[-1] == ")" for p in plugs))
        letters = "".join(p[1:3] for p in plugs)
        self.assertEqual(len(set(letters)), len(letters))

    def test_plug_count(self) -> None:
        line = generate_settings_line(legacy_config(), build_rng(3), max_pairs=4)
        self.assertEqual(line.count("("), 4)

    def test_reflector_with_fixed_point_never_chosen(self) -> None:
        cfg = legacy_config()
        open_point = RotorSpec("Z", RotorKind.REFLECTING, "", ["AB", "CD"])
        rotors = [s for s in cfg.rotors if s.kind is not RotorKind.REFLECTING] + [open_point]
        with self.assertRaises(ConfigError):
            generate_settings_line(MachineConfig(cfg.alphabet, cfg.num_rotors, cfg.pawls, rotors), build_rng(5))

        rotors.append(next(s for s in cfg.rotors if s.name == "B"))
        mixed = MachineConfig(cfg.alphabet, cfg.num_rotors, cfg.pawls, rotors)
        for line in generate_key_sheet(mixed, 20, seed=5):
            self.assertEqual(line.split()[1], "B")

    def test_unusable_config(self) -> None:
        cfg = legacy_config()
        cfg = MachineConfig(cfg.alphabet, cfg.num_rotors, cfg.pawls,
                            [s for s in cfg.rotors if s.name not in ("Beta", "Gamma")])
        with self.assertRaises(ConfigError):
            generate_settings_line(cfg, build_rng(1))


if __name__ == "__main__":
    unittest.main()
