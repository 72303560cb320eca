import pytest

from chip8.framebuffer import FrameBuffer


def lit_pixels(frame):
    return {(x, y)
            for y, row in enumerate(frame.tolist())
            for x, pixel in enumerate(row) if pixel}


class TestFrameBuffer:

    def test_toggle_reports_collision(self):
        frame_buffer = FrameBuffer()
        assert not frame_buffer.toggle_pixel(3, 4)
        assert frame_buffer.get_pixel(3, 4) == 1
        assert frame_buffer.toggle_pixel(3, 4)
        assert frame_buffer.get_pixel(3, 4) == 0

    def test_view_is_read_only_and_live(self):
        frame_buffer = FrameBuffer()
        view = frame_buffer.view()
        assert view.shape == (32, 64)
        frame_buffer.toggle_pixel(63, 31)
        assert view[31, 63] == 1
        with pytest.raises(TypeError):
            view[0, 0] = 1

    def test_clear_with_view_outstanding(self):
        frame_buffer = FrameBuffer()
        view = frame_buffer.view()
        frame_buffer.toggle_pixel(0, 0)
        frame_buffer.clear()
        assert view[0, 0] == 0
        assert frame_buffer.is_blank()

    def test_text_rendering(self):
        frame_buffer = FrameBuffer(screen_width=4, screen_height=2)
        frame_buffer.toggle_pixel(0, 0)
        frame_buffer.toggle_pixel(3, 1)
        assert str(frame_buffer) == '█   \n   █'


class TestDrawSprite:

    def test_draws_font_glyph(self, load_program):
        # V0 = V1 = 0, I = glyph 0, draw 5 rows
        project_cpu = load_program(0xD015)
        project_cpu.cpu_execute_cycle()
        frame = project_cpu.cpu_framebuffer()
        assert [frame[0, x] for x in range(5)] == [1, 1, 1, 1, 0]
        assert [frame[1, x] for x in range(5)] == [1, 0, 0, 1, 0]
        assert len(lit_pixels(frame)) == 14
        assert project_cpu.cpu_registers['v'][0xF] == 0
        assert project_cpu.cpu_redraw

    def test_drawing_twice_restores_screen_and_collides(self, load_program):
        project_cpu = load_program(0x600A, 0x6105, 0xD015, 0xD015)
        for _ in range(3):
            project_cpu.cpu_execute_cycle()
        assert not project_cpu.cpu_frame_buffer.is_blank()
        project_cpu.cpu_clear_redraw()

        project_cpu.cpu_execute_cycle()
        assert project_cpu.cpu_frame_buffer.is_blank()
        assert project_cpu.cpu_registers['v'][0xF] == 1
        assert project_cpu.cpu_redraw

    def test_collision_is_sticky(self, cpu):
        cpu.cpu_frame_buffer.toggle_pixel(0, 0)
        cpu.cpu_memory[0x300:0x302] = bytes([0x80, 0x40])
        cpu.cpu_registers['index'] = 0x300
        cpu.cpu_process_opcode(0xD012)
        # the first row collided, the second did not
        assert cpu.cpu_registers['v'][0xF] == 1
        assert lit_pixels(cpu.cpu_framebuffer()) == {(1, 1)}

    def test_clips_at_right_and_bottom_edges(self, cpu):
        cpu.cpu_registers['v'][0] = 62
        cpu.cpu_registers['v'][1] = 30
        cpu.cpu_memory[0x300:0x304] = bytes([0xF0] * 4)
        cpu.cpu_registers['index'] = 0x300
        cpu.cpu_process_opcode(0xD014)
        assert lit_pixels(cpu.cpu_framebuffer()) == {(62, 30), (63, 30), (62, 31), (63, 31)}
        assert cpu.cpu_registers['v'][0xF] == 0

    def test_off_screen_origin_draws_nothing(self, cpu):
        cpu.cpu_registers['v'][0] = 200
        cpu.cpu_process_opcode(0xD015)
        assert cpu.cpu_frame_buffer.is_blank()
        assert cpu.cpu_redraw

    def test_zero_height_sprite_only_sets_redraw(self, cpu):
        cpu.cpu_registers['v'][0xF] = 1
        cpu.cpu_process_opcode(0xD010)
        assert cpu.cpu_frame_buffer.is_blank()
        assert cpu.cpu_registers['v'][0xF] == 0
        assert cpu.cpu_redraw


class TestClearScreen:

    def test_clear_after_draw(self, load_program):
        project_cpu = load_program(0xD015, 0x00E0)
        project_cpu.cpu_execute_cycle()
        project_cpu.cpu_clear_redraw()
        project_cpu.cpu_execute_cycle()
        assert project_cpu.cpu_framebuffer().tobytes() == bytes(64 * 32)
        assert project_cpu.cpu_redraw

    def test_redraw_stays_set_until_host_clears_it(self, load_program):
        project_cpu = load_program(0x00E0, 0x6000, 0x6000)
        project_cpu.cpu_execute_cycle()
        project_cpu.cpu_execute_cycle()
        project_cpu.cpu_execute_cycle()
        assert project_cpu.cpu_redraw
        project_cpu.cpu_clear_redraw()
        assert not project_cpu.cpu_redraw
