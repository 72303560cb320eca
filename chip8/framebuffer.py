from chip8.addresses import SCREEN_HEIGHT, SCREEN_WIDTH

# Characters used when printing the frame as text
PIXEL_CHARACTERS = {
    0: ' ',
    1: '█',
}


class FrameBuffer(object):
    """
    The monochrome pixel grid of the Chip 8. Pixels are stored one per byte,
    row-major, with 0 meaning off and 1 meaning on. The CPU is the only
    writer; hosts get a read-only view through view().
    """
    def __init__(self, screen_width=SCREEN_WIDTH, screen_height=SCREEN_HEIGHT):
        self.screen_width = screen_width
        self.screen_height = screen_height
        self.pixels = bytearray(screen_width * screen_height)

    def __str__(self):
        rows = []
        for y_axis_position in range(self.screen_height):
            start = y_axis_position * self.screen_width
            rows.append(''.join(
                PIXEL_CHARACTERS[pixel]
                for pixel in self.pixels[start:start + self.screen_width]))
        return '\n'.join(rows)

    def in_bounds(self, x_axis_position, y_axis_position):
        return 0 <= x_axis_position < self.screen_width and \
            0 <= y_axis_position < self.screen_height

    def get_pixel(self, x_axis_position, y_axis_position):
        """
        Returns whether the pixel is on (1) or off (0) at the specified
        location.

        :param x_axis_position: the x coordinate to check
        :param y_axis_position: the y coordinate to check
        :return: the color of the specified pixel (0 or 1)
        """
        return self.pixels[y_axis_position * self.screen_width + x_axis_position]

    def toggle_pixel(self, x_axis_position, y_axis_position):
        """
        XOR the pixel at the specified location. The coordinate system starts
        with (0, 0) being in the top left of the screen.

        :param x_axis_position: the x coordinate of the pixel
        :param y_axis_position: the y coordinate of the pixel
        :return: True if the pixel was on before the toggle (a collision)
        """
        offset = y_axis_position * self.screen_width + x_axis_position
        was_lit = self.pixels[offset] == 1
        self.pixels[offset] ^= 1
        return was_lit

    def clear(self):
        """
        Turns off all the pixels.
        """
        self.pixels[:] = bytes(len(self.pixels))

    def is_blank(self):
        return not any(self.pixels)

    def view(self):
        """
        Returns a zero-copy, read-only (height x width) view of the pixels.
        Index it as view[y, x], or call tolist() for nested rows.
        """
        return memoryview(self.pixels).cast(
            'B', (self.screen_height, self.screen_width)).toreadonly()
