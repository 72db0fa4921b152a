"""Host-side emulator configuration."""

from chex import dataclass

from chix8.constants import TIMER_FREQUENCY


@dataclass(frozen=True)
class EmulatorConfig:
    """Front-end policy for running a machine.

    Attributes:
        instructions_per_frame: Instructions executed between timer ticks
            (10 at 60 FPS is the usual ~600 Hz CPU speed)
        fps: Frames, and therefore timer ticks, per second
        scale: Pixel upscaling factor for windowed rendering
        color_scheme: Name passed to ``create_color_scheme``
        seed: Seed for the ``RND`` PRNG key
        log_level: Console logger level
        trace: Log every executed instruction with a register dump
    """
    instructions_per_frame: int = 10
    fps: int = TIMER_FREQUENCY
    scale: int = 8
    color_scheme: str = "classic"
    seed: int = 0
    log_level: str = "INFO"
    trace: bool = False

    @classmethod
    def from_args(cls, args) -> "EmulatorConfig":
        """Build a config from an ``argparse.Namespace``, ignoring unrelated fields."""
        return cls(
            instructions_per_frame=args.ipf,
            fps=args.fps,
            scale=args.scale,
            color_scheme=args.color_scheme,
            seed=args.seed,
            log_level="DEBUG" if args.trace else args.log_level,
            trace=args.trace,
        )
