"""Tests for miscellaneous instructions (Fxxx)."""

import pytest
from chix8 import execute, tick_timers, MemoryAccessFault
from chix8.constants import FONT_START, FONT_DATA


class TestTimers:
    """Test timer-related instructions."""

    def test_misc_timer_instructions(self, fresh_state):
        """Test timer set and get operations."""
        state = fresh_state

        state = execute(state, 0x6030)  # V0 = 48
        state = execute(state, 0xF015)  # Set delay timer to V0
        assert state.delay_timer == 48

        state = execute(state, 0x6120)  # V1 = 32
        state = execute(state, 0xF118)  # Set sound timer to V1
        assert state.sound_timer == 32

        state = execute(state, 0xF207)  # V2 = delay timer
        assert state.V[2] == 48

    def test_tick_timers(self, fresh_state):
        """Both timers count down once per tick and stop at zero."""
        state = execute(fresh_state, 0x6002)
        state = execute(state, 0xF015)  # DT = 2
        state = execute(state, 0x6101)
        state = execute(state, 0xF118)  # ST = 1

        state = tick_timers(state)
        assert state.delay_timer == 1
        assert state.sound_timer == 0

        state = tick_timers(state)
        state = tick_timers(state)
        assert state.delay_timer == 0
        assert state.sound_timer == 0


class TestBCD:
    """Test BCD conversion."""

    @pytest.mark.parametrize("value,digits", [(157, [1, 5, 7]), (0, [0, 0, 0]), (255, [2, 5, 5]), (9, [0, 0, 9])])
    def test_misc_bcd_conversion(self, fresh_state, value, digits):
        """FX33 - Hundreds, tens and ones at I, I+1, I+2."""
        state = execute(fresh_state, 0x6000 | value)
        state = execute(state, 0xA300)  # I = 0x300
        state = execute(state, 0xF033)

        assert [int(b) for b in state.memory[0x300:0x303]] == digits
        assert state.I == 0x300

    def test_bcd_overrunning_memory(self, fresh_state):
        """FX33 - Writing past 0xFFF is a fault."""
        state = execute(fresh_state, 0xAFFE)
        with pytest.raises(MemoryAccessFault):
            execute(state, 0xF033)


class TestFont:
    """Test font character addressing."""

    def test_font_all_characters(self, fresh_state):
        """FX29 - Glyph address for every hex digit."""
        state = fresh_state

        for digit in range(16):
            state = execute(state, 0x6000 | digit)  # V0 = digit
            state = execute(state, 0xF029)  # I = font address

            expected = FONT_START + digit * 5
            assert state.I == expected, f"Font address wrong for digit {digit:X}"

    def test_font_uses_low_nibble(self, fresh_state):
        """FX29 - Only the low nibble of VX selects the glyph."""
        state = execute(fresh_state, 0x601A)
        state = execute(state, 0xF029)
        assert state.I == FONT_START + 0xA * 5

    def test_font_loaded_at_start(self, fresh_state):
        """The 80-byte font sits at the bottom of memory."""
        assert (fresh_state.memory[FONT_START:FONT_START + 80] == FONT_DATA).all()
        assert [int(b) for b in fresh_state.memory[0x4B:0x50]] == [0xF0, 0x80, 0xF0, 0x80, 0x80]


class TestMemoryOperations:
    """Test store/load register operations."""

    def test_store_load_round_trip(self, fresh_state):
        """FX55 then FX65 restores V0-V3; I does not move."""
        state = fresh_state
        state = execute(state, 0x6011)
        state = execute(state, 0x6122)
        state = execute(state, 0x6233)
        state = execute(state, 0x6344)
        state = execute(state, 0x6499)  # V4 must not be stored
        state = execute(state, 0xA400)

        state = execute(state, 0xF355)
        assert [int(b) for b in state.memory[0x400:0x405]] == [0x11, 0x22, 0x33, 0x44, 0x00]
        assert state.I == 0x400

        state = state.replace(V=state.V.at[:4].set(0))
        state = execute(state, 0xF365)
        assert [int(v) for v in state.V[:5]] == [0x11, 0x22, 0x33, 0x44, 0x99]
        assert state.I == 0x400

    def test_load_only_touches_requested_registers(self, fresh_state):
        """FX65 - Registers above X keep their value."""
        state = execute(fresh_state, 0x6577)
        state = execute(state, 0xA000)  # font bytes as source
        state = execute(state, 0xF165)
        assert state.V[0] == 0xF0
        assert state.V[1] == 0x90
        assert state.V[5] == 0x77

    @pytest.mark.parametrize("opcode", [0xFF55, 0xFF65])
    def test_block_transfer_overrun(self, fresh_state, opcode):
        """FX55/FX65 - Ranges past 0xFFF are faults, not truncated."""
        state = execute(fresh_state, 0xAFF8)
        with pytest.raises(MemoryAccessFault):
            execute(state, opcode)

    def test_add_to_index(self, fresh_state):
        """FX1E - Add VX to I register."""
        state = execute(fresh_state, 0x6010)  # V0 = 0x10
        state = execute(state, 0xA300)  # I = 0x300
        state = execute(state, 0xF01E)  # I += V0

        assert state.I == 0x310
        assert state.V[15] == 0

    def test_add_to_index_no_flag(self, fresh_state):
        """FX1E - Past 0xFFF, I keeps counting and VF is untouched."""
        state = execute(fresh_state, 0x60FF)
        state = execute(state, 0x6F05)
        state = execute(state, 0xAF80)
        state = execute(state, 0xF01E)

        assert state.I == 0x107F
        assert state.V[15] == 5


class TestKeypad:
    """Test keypad operations."""

    def test_skip_if_key_pressed(self, fresh_state):
        """EX9E - Skip if key pressed."""
        state = execute(fresh_state, 0x6005)  # V0 = 5
        state = state.replace(keypad=state.keypad.at[5].set(True))
        initial_pc = state.pc

        state = execute(state, 0xE09E)
        assert state.pc == initial_pc + 2

    def test_skip_if_key_pressed_not_down(self, fresh_state):
        """EX9E - No skip when the key is up."""
        state = execute(fresh_state, 0x6005)
        initial_pc = state.pc

        state = execute(state, 0xE09E)
        assert state.pc == initial_pc

    def test_skip_if_key_not_pressed(self, fresh_state):
        """EXA1 - Skip if key not pressed."""
        state = execute(fresh_state, 0x6005)  # V0 = 5
        initial_pc = state.pc

        state = execute(state, 0xE0A1)
        assert state.pc == initial_pc + 2

    def test_wait_for_key_arms_wait(self, fresh_state):
        """FX0A - Enters the awaiting-key state without moving PC."""
        initial_pc = fresh_state.pc

        state = execute(fresh_state, 0xF30A)

        assert state.awaiting_key
        assert state.waiting_register == 3
        assert state.pc == initial_pc
