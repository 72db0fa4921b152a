"""Console logging utilities for chix8.

Provides a small level-filtered console logger and a machine-aware subclass
that renders instruction traces and register dumps.
"""

import sys
import time

from chix8.decode import Instruction


class ConsoleLogger:
    """Console logger with levels, elapsed-time stamps and optional colors."""

    def __init__(
        self,
        name: str = "chix8",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.use_colors = (
            use_colors and hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {
                k: ""
                for k in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "RESET"]
            }
        )

        self.level_order = {
            "DEBUG": 0,
            "INFO": 1,
            "WARNING": 2,
            "ERROR": 3,
            "CRITICAL": 4,
        }
        if self.log_level not in self.level_order:
            raise ValueError(
                f"Unknown log level '{log_level}'. Available: {list(self.level_order)}"
            )

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order[self.log_level]

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self._should_log(level):
            formatted = self._format_message(level, message)
            print(formatted, flush=True)

    def debug(self, message: str):
        """Log debug message."""
        self.log("DEBUG", message)

    def info(self, message: str):
        """Log info message."""
        self.log("INFO", message)

    def warning(self, message: str):
        """Log warning message."""
        self.log("WARNING", message)

    def error(self, message: str):
        """Log error message."""
        self.log("ERROR", message)

    def critical(self, message: str):
        """Log critical message."""
        self.log("CRITICAL", message)


def format_registers(state) -> str:
    """One-block dump of PC, I, timers and V0-VF."""
    header = (
        f"PC: {int(state.pc):04X} | I: {int(state.I):04X} | "
        f"DT: {int(state.delay_timer):02X} | ST: {int(state.sound_timer):02X} | "
        f"SP: {int(state.stack.pointer):X}"
    )
    rows = []
    for start in range(0, 16, 8):
        rows.append(" | ".join(f"V{i:X}: {int(state.V[i]):02X}" for i in range(start, start + 8)))
    return "\n".join([header, *rows])


class MachineLogger(ConsoleLogger):
    """Logger for a running machine: traces, unknown opcodes and faults."""

    def __init__(self, name: str = "chix8", trace: bool = False, **kwargs):
        super().__init__(name, **kwargs)
        self.trace = trace

    def log_instruction(self, state, address: int, instruction: Instruction):
        """Log an executed instruction and the resulting registers at DEBUG."""
        if not self.trace or not self._should_log("DEBUG"):
            return
        self.debug(f"{address:04X}  {instruction.raw:04X}  {instruction.mnemonic}\n{format_registers(state)}")

    def log_unknown_opcode(self, address: int, instruction: Instruction):
        self.warning(f"Unknown opcode {instruction.raw:04X} at {address:04X}, skipping")

    def log_fault(self, state, fault: Exception):
        """Log a fault together with the registers at the time it was raised."""
        self.error(f"{type(fault).__name__}: {fault}\n{format_registers(state)}")
