"""Stateful CHIP-8 machine.

``Machine`` owns one ``EmulatorState`` and advances it with the pure functions
of ``chix8.emulator``. Front ends read ``display`` and write the keypad between
calls to ``step``; nothing here is thread-safe, so a threaded host must
serialise access to the machine itself.
"""

from typing import Iterable, Optional

import jax
import jax.numpy as jnp

from chix8.constants import NUM_KEYS
from chix8.decode import Instruction, Op
from chix8.emulator import step, tick_timers, load_program
from chix8.logging import MachineLogger
from chix8.state import EmulatorState, create_state


class Machine:
    """A CHIP-8 machine with a mutating ``step()``."""

    def __init__(self, seed: int = 0, logger: Optional[MachineLogger] = None):
        self.seed = seed
        self.logger = logger or MachineLogger()
        self.program = b""
        self.reset()

    def reset(self):
        """Return to power-on state, reloading the current program if any."""
        self.state = create_state(jax.random.PRNGKey(self.seed))
        if self.program:
            self.state = load_program(self.state, self.program)
        self.instruction_count = 0
        self.unknown_opcode_count = 0

    def load_program(self, program: bytes):
        """Load a raw program image at 0x200."""
        program = bytes(program)
        self.state = load_program(self.state, program)
        self.program = program

    def load_rom(self, filename: str):
        """Load a ROM file at 0x200."""
        with open(filename, "rb") as f:
            self.load_program(f.read())
        self.logger.info(f"Loaded {filename} ({len(self.program)} bytes)")

    def step(self) -> Optional[Instruction]:
        """Run one fetch-decode-execute cycle.

        Returns the executed instruction, or ``None`` while waiting for a key.
        ``ChipFault`` propagates and leaves the state as it was before the call.
        """
        address = int(self.state.pc)
        state, instruction = step(self.state)
        self.state = state
        if instruction is None:
            return None

        self.instruction_count += 1
        if instruction.op is Op.UNKNOWN:
            self.unknown_opcode_count += 1
            self.logger.log_unknown_opcode(address, instruction)
        else:
            self.logger.log_instruction(state, address, instruction)
        return instruction

    def run(self, count: int):
        """Call ``step`` ``count`` times."""
        for _ in range(count):
            self.step()

    def tick_timers(self):
        """Decrement DT and ST once. Call at the host's timer rate."""
        self.state = tick_timers(self.state)

    def press_key(self, key: int):
        self._check_key(key)
        self.state = self.state.replace(keypad=self.state.keypad.at[key].set(True))

    def release_key(self, key: int):
        self._check_key(key)
        self.state = self.state.replace(keypad=self.state.keypad.at[key].set(False))

    def set_keypad(self, pressed: Iterable[bool]):
        """Replace all 16 key states at once."""
        keypad = jnp.asarray(list(pressed), dtype=jnp.bool_)
        if keypad.shape != (NUM_KEYS,):
            raise ValueError(f"Expected {NUM_KEYS} key states, got {keypad.shape[0]}")
        self.state = self.state.replace(keypad=keypad)

    @staticmethod
    def _check_key(key: int):
        if not 0 <= key < NUM_KEYS:
            raise ValueError(f"Key must be in 0-{NUM_KEYS - 1}, got {key}")

    @property
    def display(self) -> jnp.ndarray:
        """Boolean (64, 32) frame buffer, indexed ``[x, y]``."""
        return self.state.display

    @property
    def pc(self) -> int:
        return int(self.state.pc)

    @property
    def registers(self) -> list[int]:
        return [int(v) for v in self.state.V]

    @property
    def awaiting_key(self) -> bool:
        return self.state.awaiting_key

    @property
    def sound_active(self) -> bool:
        """True while the sound timer is non-zero."""
        return int(self.state.sound_timer) > 0

    def __repr__(self) -> str:
        return (
            f"Machine(pc={self.pc:04X}, instructions={self.instruction_count}, "
            f"awaiting_key={self.awaiting_key})"
        )
