"""Command line entry point: ``chix8 ROM [options]``."""

import argparse
import sys

from chix8.config import EmulatorConfig
from chix8.errors import Chix8Error, ChipFault
from chix8.frontend import run_headless, run_pygame, run_terminal
from chix8.logging import MachineLogger
from chix8.machine import Machine
from chix8.rendering import save_screenshot


def build_parser() -> argparse.ArgumentParser:
    defaults = EmulatorConfig()
    parser = argparse.ArgumentParser(prog="chix8", description="Run a CHIP-8 program.")
    parser.add_argument("rom", help="Path to a raw CHIP-8 program image")
    parser.add_argument("--frontend", choices=["pygame", "terminal", "headless"], default="pygame")
    parser.add_argument("--ipf", type=int, default=defaults.instructions_per_frame,
                        help="Instructions per frame (default: %(default)s)")
    parser.add_argument("--fps", type=int, default=defaults.fps,
                        help="Frames and timer ticks per second (default: %(default)s)")
    parser.add_argument("--scale", type=int, default=defaults.scale)
    parser.add_argument("--color-scheme", default=defaults.color_scheme)
    parser.add_argument("--seed", type=int, default=defaults.seed)
    parser.add_argument("--log-level", default=defaults.log_level,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    parser.add_argument("--trace", action="store_true",
                        help="Log every instruction with a register dump")
    parser.add_argument("--step", action="store_true",
                        help="Terminal front end: wait for Enter after each instruction")
    parser.add_argument("--steps", type=int, default=10_000,
                        help="Headless front end: number of instructions to run")
    parser.add_argument("--screenshot", metavar="PATH",
                        help="Headless front end: save the final frame to PATH")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config = EmulatorConfig.from_args(args)
    logger = MachineLogger(trace=config.trace, log_level=config.log_level)

    machine = Machine(seed=config.seed, logger=logger)
    try:
        machine.load_rom(args.rom)
    except (OSError, Chix8Error) as e:
        logger.error(f"Cannot load {args.rom}: {e}")
        return 1

    if args.frontend == "pygame":
        run_pygame(machine, config)
    elif args.frontend == "terminal":
        run_terminal(machine, config, single_step=args.step)
    else:
        try:
            run_headless(machine, config, args.steps)
        except ChipFault:
            return 2
        logger.info(
            f"Ran {machine.instruction_count} instructions, "
            f"{machine.unknown_opcode_count} unknown opcodes skipped"
        )
        if args.screenshot:
            save_screenshot(machine.display, args.screenshot, config.scale, config.color_scheme)
            logger.info(f"Saved {args.screenshot}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
