import argparse
import logging
import sys
from pathlib import Path
from random import Random

import pygame

from chip8.cpu import CPU, random_byte
from chip8.exception import Chip8Exception
from chip8.screen import Screen

logger = logging.getLogger(__name__)

# A simple timer event used for the delay and sound timers
TIMER = pygame.USEREVENT + 1
# Delay timer decrement interval (in ms)
DELAY_INTERVAL = 17

# Sets which keys on the keyboard map to the Chip 8 keys
KEY_MAPPINGS = {
    0x0: pygame.K_KP0,
    0x1: pygame.K_KP1,
    0x2: pygame.K_KP2,
    0x3: pygame.K_KP3,
    0x4: pygame.K_KP4,
    0x5: pygame.K_KP5,
    0x6: pygame.K_KP6,
    0x7: pygame.K_KP7,
    0x8: pygame.K_KP8,
    0x9: pygame.K_KP9,
    0xA: pygame.K_a,
    0xB: pygame.K_b,
    0xC: pygame.K_c,
    0xD: pygame.K_d,
    0xE: pygame.K_e,
    0xF: pygame.K_f,
}


def keys_from_pressed(keys_pressed):
    """
    Translate pygame's keyboard state into the 16 Chip 8 key states.

    :param keys_pressed: the result of pygame.key.get_pressed()
    :return: a list of 16 booleans
    """
    return [bool(keys_pressed[KEY_MAPPINGS[key_number]])
            for key_number in range(len(KEY_MAPPINGS))]


def build_cpu(args):
    """
    Create and reset a CPU configured from the command-line arguments.
    """
    random_source = random_byte
    if args.seed is not None:
        rng = Random(args.seed)
        random_source = lambda: rng.randint(0, 255)
    project_cpu = CPU(
        random_source=random_source,
        tone_callback=lambda: logger.debug('Tone on'),
        tick_timers=not args.decouple_timers)
    project_cpu.cpu_initialize()
    project_cpu.cpu_load_rom(Path(args.rom).read_bytes())
    return project_cpu


def run_headless(project_cpu, cycles):
    """
    Run the CPU for a fixed number of cycles with no window and no keys.

    :return: the final frame as text
    """
    for _ in range(cycles):
        project_cpu.cpu_execute_cycle()
    return str(project_cpu.cpu_frame_buffer)


def screen_cpu_connector(args, project_cpu):
    """
    Runs the main emulator loop with the specified arguments.

    :param args: the parsed command-line arguments
    :param project_cpu: an initialized CPU with a ROM loaded
    """
    project_screen = Screen(ratio=args.scale)
    project_screen.init_display()
    if args.decouple_timers:
        pygame.time.set_timer(TIMER, DELAY_INTERVAL)
    running = True

    while running:
        pygame.time.wait(args.op_delay)

        # Check for events
        for event in pygame.event.get():
            if event.type == TIMER:
                project_cpu.cpu_decrement_timers()
            if event.type == pygame.QUIT:
                running = False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_q:
                running = False

        project_cpu.cpu_set_keys(keys_from_pressed(pygame.key.get_pressed()))
        project_cpu.cpu_execute_cycle()

        if project_cpu.cpu_redraw:
            project_screen.draw_frame(project_cpu.cpu_framebuffer())
            project_cpu.cpu_clear_redraw()

    pygame.quit()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Starts a simple Chip 8 emulator")
    parser.add_argument(
        "rom", help="the ROM file to load on startup")
    parser.add_argument(
        "-s", "--scale", help="the scale factor to apply to the display "
                              "(default is 10)", type=int, default=10, dest="scale")
    parser.add_argument(
        "-d", "--delay", help="sets the CPU operation to take at least "
                              "the specified number of milliseconds to execute (default is 1)",
        type=int, default=1, dest="op_delay")
    parser.add_argument(
        "--seed", help="seed the random number generator for repeatable runs",
        type=int, default=None)
    parser.add_argument(
        "--decouple-timers", help="decrement the timers at 60Hz instead of once per "
                                  "instruction", action="store_true")
    parser.add_argument(
        "--headless", help="run without a window and print the final frame",
        action="store_true")
    parser.add_argument(
        "--cycles", help="number of cycles to run in headless mode (default is 1000)",
        type=int, default=1000)
    parser.add_argument(
        "-v", "--verbose", help="enable debug logging", action="store_true")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(name)s: %(message)s")

    try:
        project_cpu = build_cpu(args)
        if args.headless:
            print(run_headless(project_cpu, args.cycles))
            print(project_cpu)
        else:
            screen_cpu_connector(args, project_cpu)
    except OSError as error:
        logger.error("Could not read ROM: %s", error)
        return 1
    except Chip8Exception as error:
        logger.error("Emulation stopped: %s", error)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
