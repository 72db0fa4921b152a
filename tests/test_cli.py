"""Tests for configuration, the command line and the headless front end."""

import pytest
from chix8 import EmulatorConfig, MemoryAccessFault
from chix8.cli import build_parser, main
from chix8.frontend import KEY_LAYOUT, frame_array, run_frame, run_headless
from conftest import program


def test_config_defaults():
    config = EmulatorConfig()
    assert config.instructions_per_frame == 10
    assert config.fps == 60
    assert config.color_scheme == "classic"
    assert not config.trace


def test_config_from_args():
    args = build_parser().parse_args(["game.ch8", "--ipf", "20", "--seed", "3", "--trace"])
    config = EmulatorConfig.from_args(args)
    assert config.instructions_per_frame == 20
    assert config.seed == 3
    assert config.trace
    assert config.log_level == "DEBUG"


def test_parser_rejects_unknown_frontend():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["game.ch8", "--frontend", "web"])


def test_run_frame_ticks_once(machine):
    machine.load_program(program(0x6009, 0xF015, 0x1204))
    run_frame(machine, 5)
    assert machine.instruction_count == 5
    assert int(machine.state.delay_timer) == 8


def test_run_headless(machine):
    machine.load_program(program(0x7001, 0x1200))
    run_headless(machine, EmulatorConfig(instructions_per_frame=4), 20)
    assert machine.instruction_count == 20
    assert machine.registers[0] == 10


def test_run_headless_fault(machine):
    machine.load_program(program(0x1FFF))
    with pytest.raises(MemoryAccessFault):
        run_headless(machine, EmulatorConfig(), 5)


def test_main_headless(tmp_path, capsys):
    rom = tmp_path / "rom.ch8"
    rom.write_bytes(program(0x6005, 0xF029, 0xD005, 0x1206))
    shot = tmp_path / "shot.png"

    code = main([str(rom), "--frontend", "headless", "--steps", "8", "--screenshot", str(shot)])

    assert code == 0
    assert shot.exists()
    assert "Ran 8 instructions" in capsys.readouterr().out


def test_main_missing_rom(tmp_path):
    assert main([str(tmp_path / "missing.ch8"), "--frontend", "headless"]) == 1


def test_main_fault_exit_code(tmp_path):
    rom = tmp_path / "rom.ch8"
    rom.write_bytes(program(0x00EE))
    assert main([str(rom), "--frontend", "headless", "--steps", "3"]) == 2


def test_frame_array_matches_surface_layout(machine):
    machine.load_program(program(0x6005, 0xF029, 0xD115))
    machine.run(3)
    frame = frame_array(machine, EmulatorConfig(scale=2, color_scheme="white"))
    assert frame.shape == (128, 64, 3)
    # Glyph 5 starts with 0xF0: the first four columns of row 0 are lit.
    assert tuple(frame[6, 0]) == (255, 255, 255)
    assert tuple(frame[8, 0]) == (0, 0, 0)


def test_arrow_keys_map_to_directions():
    assert KEY_LAYOUT["up"] == 0x2
    assert KEY_LAYOUT["down"] == 0x8
    assert KEY_LAYOUT["left"] == 0x4
    assert KEY_LAYOUT["right"] == 0x6
