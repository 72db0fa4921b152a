"""CHIP-8 ALU operations (8xxx).

Each operation maps ``(vx, vy)`` to ``(result, flag)``. ``flag`` is ``None``
when VF is left untouched. The functions only use operators, so they work on
plain ints as well as on whole ``jnp`` integer arrays.
"""

from chix8.state import EmulatorState
from chix8.decode import Instruction, Op
from chix8.constants import FLAG_REGISTER


def alu_set(vx, vy):
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx, vy):
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx, vy):
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx, vy):
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx, vy):
    """8XY4 - Add: VX += VY, VF = carry out of the unwrapped sum."""
    total = vx + vy
    return total & 0xFF, (total >> 8) & 1


def alu_sub_xy(vx, vy):
    """8XY5 - Subtract: VX -= VY, VF = 1 when VX > VY."""
    return (vx - vy) & 0xFF, (vx > vy) * 1


def alu_shift_right(vx, vy):
    """8XY6 - Shift right: VX >>= 1, VF = old bit 0."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx, vy):
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when VY > VX."""
    return (vy - vx) & 0xFF, (vy > vx) * 1


def alu_shift_left(vx, vy):
    """8XYE - Shift left: VX <<= 1, VF = old bit 7."""
    return (vx << 1) & 0xFF, (vx >> 7) & 1


ALU_OPERATIONS = {
    Op.LD_REG: alu_set,
    Op.OR: alu_or,
    Op.AND: alu_and,
    Op.XOR: alu_xor,
    Op.ADD_REG: alu_add,
    Op.SUB: alu_sub_xy,
    Op.SHR: alu_shift_right,
    Op.SUBN: alu_sub_yx,
    Op.SHL: alu_shift_left,
}


def execute_alu_operation(state: EmulatorState, instruction: Instruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    vx = int(state.V[instruction.x])
    # Shifts carry no Vy operand.
    vy = int(state.V[instruction.y]) if instruction.y is not None else 0

    result, vf = ALU_OPERATIONS[instruction.op](vx, vy)

    # VF is written last so the flag wins when x is F.
    new_V = state.V.at[instruction.x].set(result)
    if vf is not None:
        new_V = new_V.at[FLAG_REGISTER].set(vf)
    return state.replace(V=new_V)
