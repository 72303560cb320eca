"""
The command-line host, exercised headless so no window is opened.
"""

from collections import defaultdict

import pygame

from chip8.cpu import CPU
from chip8.main import KEY_MAPPINGS, build_cpu, keys_from_pressed, main, parse_args, run_headless


class TestArguments:

    def test_defaults(self):
        args = parse_args(['game.ch8'])
        assert args.rom == 'game.ch8'
        assert args.scale == 10
        assert args.op_delay == 1
        assert args.seed is None
        assert not args.decouple_timers
        assert not args.headless

    def test_seeded_cpu_is_repeatable(self, tmp_path, assemble):
        rom_path = tmp_path / 'random.ch8'
        rom_path.write_bytes(assemble(0xC0FF, 0xC1FF))
        args = parse_args([str(rom_path), '--seed', '42'])

        registers = []
        for _ in range(2):
            project_cpu = build_cpu(args)
            run_headless(project_cpu, 2)
            registers.append(project_cpu.cpu_registers['v'][0:2])
        assert registers[0] == registers[1]

    def test_decouple_timers_flag(self, tmp_path, assemble):
        rom_path = tmp_path / 'timer.ch8'
        rom_path.write_bytes(assemble(0x6009, 0xF015))
        project_cpu = build_cpu(parse_args([str(rom_path), '--decouple-timers']))
        run_headless(project_cpu, 2)
        assert project_cpu.cpu_timers['delay'] == 9


class TestKeys:

    def test_mapped_keys_are_pressed(self):
        keys_pressed = defaultdict(bool)
        keys_pressed[pygame.K_KP1] = True
        keys_pressed[pygame.K_f] = True
        keys = keys_from_pressed(keys_pressed)
        assert len(keys) == 16
        assert [number for number, pressed in enumerate(keys) if pressed] == [0x1, 0xF]

    def test_every_key_is_mapped(self):
        assert sorted(KEY_MAPPINGS) == list(range(16))


class TestHeadless:

    def test_run_headless_returns_text_frame(self, assemble):
        project_cpu = CPU()
        project_cpu.cpu_initialize()
        project_cpu.cpu_load_rom(assemble(0xD005, 0x1202))
        frame = run_headless(project_cpu, 10).split('\n')
        assert len(frame) == 32
        assert frame[0].startswith('████ ')
        assert frame[1].startswith('█  █ ')

    def test_main_headless_exit_code(self, tmp_path, assemble, capsys):
        rom_path = tmp_path / 'draw.ch8'
        rom_path.write_bytes(assemble(0xD005, 0x1202))
        assert main([str(rom_path), '--headless', '--cycles', '5']) == 0
        out = capsys.readouterr().out
        assert '████' in out
        assert 'PC:' in out

    def test_main_reports_fault(self, tmp_path, assemble):
        rom_path = tmp_path / 'bad.ch8'
        rom_path.write_bytes(assemble(0x0123))
        assert main([str(rom_path), '--headless']) == 1

    def test_main_reports_missing_rom(self, tmp_path):
        assert main([str(tmp_path / 'missing.ch8'), '--headless']) == 1

    def test_main_rejects_oversized_rom(self, tmp_path):
        rom_path = tmp_path / 'huge.ch8'
        rom_path.write_bytes(bytes(4000))
        assert main([str(rom_path), '--headless']) == 1
