"""Front ends that drive a ``Machine``: pygame window, terminal and headless.

Each driver runs ``instructions_per_frame`` steps and one timer tick per frame.
Faults stop execution and are logged with a register dump.
"""

import os
import time

from tqdm import tqdm

from chix8.config import EmulatorConfig
from chix8.constants import SCREEN_WIDTH, SCREEN_HEIGHT
from chix8.errors import ChipFault
from chix8.machine import Machine
from chix8.rendering import chip8_display_to_rgb, create_color_scheme, display_to_text


# Classic COSMAC VIP layout mapped onto the left of a QWERTY keyboard,
# with the arrow keys doubling as 2/8/4/6:
#   1 2 3 C        1 2 3 4
#   4 5 6 D   <-   Q W E R
#   7 8 9 E        A S D F
#   A 0 B F        Z X C V
KEY_LAYOUT = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "q": 0x4, "w": 0x5, "e": 0x6, "r": 0xD,
    "a": 0x7, "s": 0x8, "d": 0x9, "f": 0xE,
    "z": 0xA, "x": 0x0, "c": 0xB, "v": 0xF,
    "up": 0x2, "down": 0x8, "left": 0x4, "right": 0x6,
}


def run_frame(machine: Machine, instructions_per_frame: int):
    """Execute one frame worth of instructions, then tick the timers."""
    for _ in range(instructions_per_frame):
        machine.step()
    machine.tick_timers()


def frame_array(machine: Machine, config: EmulatorConfig):
    """Current display as a (width, height, 3) array for ``pygame.surfarray``."""
    on_color, off_color = create_color_scheme(config.color_scheme)
    frame = chip8_display_to_rgb(machine.display, config.scale, on_color, off_color)
    return frame.swapaxes(0, 1)


def draw_overlay_text(surface, text_lines, position, font, bg_color=(0, 0, 0), text_color=(255, 255, 255), alpha=120):
    """Draw text with semi-transparent background overlay"""
    import pygame

    if not text_lines:
        return

    line_height = font.get_height()
    max_width = max(font.size(line)[0] for line in text_lines)
    overlay = pygame.Surface((max_width + 16, len(text_lines) * line_height + 8))
    overlay.set_alpha(alpha)
    overlay.fill(bg_color)
    surface.blit(overlay, position)

    x, y = position
    for i, line in enumerate(text_lines):
        text_surface = font.render(line, True, text_color)
        surface.blit(text_surface, (x + 8, y + 4 + i * line_height))


def run_pygame(machine: Machine, config: EmulatorConfig):
    """Windowed emulator loop. ESC quits, P pauses, F5 resets, F1 toggles debug."""
    import pygame

    key_map = {pygame.key.key_code(name): key for name, key in KEY_LAYOUT.items()}
    scale = config.scale

    pygame.init()
    screen = pygame.display.set_mode((SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale))
    pygame.display.set_caption("chix8")
    clock = pygame.time.Clock()
    font = pygame.font.Font(None, 18)

    running = True
    paused = False
    halted = False
    show_debug = False
    last_instruction = None

    while running:
        clock.tick(config.fps)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_p:
                    paused = not paused
                elif event.key == pygame.K_F1:
                    show_debug = not show_debug
                elif event.key == pygame.K_F5:
                    machine.reset()
                    halted = False
                    machine.logger.info("Reset")
                elif event.key in key_map:
                    machine.press_key(key_map[event.key])
            elif event.type == pygame.KEYUP:
                if event.key in key_map:
                    machine.release_key(key_map[event.key])

        if not paused and not halted:
            try:
                for _ in range(config.instructions_per_frame):
                    last_instruction = machine.step() or last_instruction
                machine.tick_timers()
            except ChipFault as fault:
                machine.logger.log_fault(machine.state, fault)
                halted = True

        pygame.surfarray.blit_array(screen, frame_array(machine, config))

        if show_debug or halted:
            state = machine.state
            lines = [
                f"PC: 0x{machine.pc:03X}  I: 0x{int(state.I):03X}",
                f"DT: {int(state.delay_timer)}  ST: {int(state.sound_timer)}",
                f"Last: {last_instruction.mnemonic if last_instruction else '-'}",
                f"Instructions: {machine.instruction_count}",
                "Status: " + ("HALTED" if halted else "PAUSED" if paused else
                              "WAITING FOR KEY" if machine.awaiting_key else "RUNNING"),
            ]
            draw_overlay_text(screen, lines, (5, 5), font, alpha=100)

        pygame.display.flip()

    pygame.quit()


def run_terminal(machine: Machine, config: EmulatorConfig, single_step: bool = False):
    """Render the display as text after every frame, or after every instruction.

    In single-step mode each instruction waits for Enter and timers are frozen;
    typing ``q`` quits.
    """
    frame_time = 1.0 / config.fps
    while True:
        try:
            if single_step:
                instruction = machine.step()
            else:
                run_frame(machine, config.instructions_per_frame)
        except ChipFault as fault:
            machine.logger.log_fault(machine.state, fault)
            return

        os.system("cls" if os.name == "nt" else "clear")
        print(display_to_text(machine.display), flush=True)

        if single_step:
            label = instruction.mnemonic if instruction else "waiting for key"
            if input(f"{machine.pc:04X}  {label} > ").strip().lower() == "q":
                return
        else:
            time.sleep(frame_time)


def run_headless(machine: Machine, config: EmulatorConfig, steps: int) -> Machine:
    """Execute ``steps`` instructions without rendering, ticking timers per frame."""
    ipf = max(1, config.instructions_per_frame)
    with tqdm(total=steps, desc="Emulating", unit="instr") as progress:
        try:
            for done in range(steps):
                machine.step()
                if (done + 1) % ipf == 0:
                    machine.tick_timers()
                progress.update(1)
        except ChipFault as fault:
            machine.logger.log_fault(machine.state, fault)
            raise
    return machine
