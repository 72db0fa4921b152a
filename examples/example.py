import time

from chix8 import Machine, display_to_text
from chix8.logging import MachineLogger

# Draws the glyphs 0-7 across the top of the screen, then spins.
PROGRAM = [
    0x6000,  # 200: LD V0, 00      digit
    0x6101,  # 202: LD V1, 01      x
    0x6201,  # 204: LD V2, 01      y
    0xF029,  # 206: LD F, V0
    0xD125,  # 208: DRW V1, V2, 5
    0x7001,  # 20A: ADD V0, 01
    0x7106,  # 20C: ADD V1, 06
    0x3008,  # 20E: SE V0, 08
    0x1206,  # 210: JP 206
    0x1212,  # 212: JP 212
]

if __name__ == "__main__":
    machine = Machine(logger=MachineLogger(trace=True, log_level="DEBUG"))
    machine.load_program(b"".join(op.to_bytes(2, "big") for op in PROGRAM))

    start = time.time()
    machine.run(60)
    print("Execution time (s):", time.time() - start)

    print(display_to_text(machine.display))
