from pygame import display, HWSURFACE, DOUBLEBUF, Color, draw

from chip8.addresses import SCREEN_HEIGHT, SCREEN_WIDTH

SCREEN_NAME = 'CHIP8 Emulator'

# Bits per pixel of the window surface
SCREEN_DEPTH = 8

# RGBA colors for an off (0) and an on (1) Chip 8 pixel
PIXEL_COLORS = {
    0: Color(0, 0, 0, 255),
    1: Color(250, 250, 250, 255)
}


class Screen(object):
    """
    A pygame window showing the Chip 8 frame buffer, each Chip 8 pixel
    blown up to a ratio x ratio square. It keeps no emulator state: every
    repaint comes from the frame it is handed.
    """
    def __init__(self, ratio, screen_height=SCREEN_HEIGHT, screen_width=SCREEN_WIDTH):
        """
        :param ratio: window pixels per Chip 8 pixel along each axis
        :param screen_height: rows in the Chip 8 frame
        :param screen_width: columns in the Chip 8 frame
        """
        self.screen_height = screen_height
        self.screen_width = screen_width
        self.scaling_ratio = ratio
        self.screen_surface = None

    def init_display(self):
        """
        Open the window, asking for a double-buffered hardware surface, and
        show it blank.
        """
        display.init()
        self.screen_surface = display.set_mode(
            ((self.screen_width * self.scaling_ratio),
             (self.screen_height * self.scaling_ratio)),
            HWSURFACE | DOUBLEBUF,
            SCREEN_DEPTH)
        display.set_caption(SCREEN_NAME)
        self.clear_screen()
        display.flip()

    def draw_screen_pixel(self, x_axis_position, y_axis_position, pixel_color):
        # Paints into the back buffer only; update_screen() shows it.
        x_axis_base_position = x_axis_position * self.scaling_ratio
        y_axis_base_position = y_axis_position * self.scaling_ratio
        draw.rect(self.screen_surface,
                  PIXEL_COLORS[pixel_color],
                  (x_axis_base_position, y_axis_base_position, self.scaling_ratio, self.scaling_ratio))

    def draw_frame(self, frame):
        """
        Repaint the whole window from a (height x width) frame, such as the
        read-only view returned by CPU.cpu_framebuffer().

        :param frame: the pixels to draw, indexed as frame[y, x]
        """
        self.clear_screen()
        for y_axis_position in range(self.screen_height):
            for x_axis_position in range(self.screen_width):
                if frame[y_axis_position, x_axis_position]:
                    self.draw_screen_pixel(x_axis_position, y_axis_position, 1)
        self.update_screen()

    def clear_screen(self):
        self.screen_surface.fill(PIXEL_COLORS[0])

    @staticmethod
    def update_screen():
        """
        Flip the back buffer onto the display. With HWSURFACE and DOUBLEBUF
        pygame waits for the vertical retrace before flipping.
        """
        display.flip()
