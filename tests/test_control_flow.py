"""Tests for control flow instructions."""

import pytest
from chip8vm import execute, create_state, Quirks
from conftest import set_registers


class TestJump:
    """Test jump instructions."""

    def test_execute_jump(self, fresh_state):
        """Test 1NNN - Jump to address."""
        state = execute(fresh_state, 0x1001)
        assert state.pc == 1

    def test_execute_jump_full_address(self, fresh_state):
        """1NNN - All twelve address bits are used."""
        state = execute(fresh_state, 0x1ABC)
        assert state.pc == 0xABC


class TestSkipInstructions:
    """Test all skip instruction variants."""

    def test_skip_if_equal_immediate_true(self, fresh_state):
        """3XNN - Should skip when VX == NN."""
        state = set_registers(fresh_state, V5=0x42)
        initial_pc = state.pc

        state = execute(state, 0x3542)  # Skip if V5 == 0x42
        assert state.pc == initial_pc + 2

    def test_skip_if_equal_immediate_false(self, fresh_state):
        """3XNN - Should not skip when VX != NN."""
        state = set_registers(fresh_state, V5=0x41)
        initial_pc = state.pc

        state = execute(state, 0x3542)  # Skip if V5 == 0x42
        assert state.pc == initial_pc

    def test_skip_if_not_equal_immediate_true(self, fresh_state):
        """4XNN - Should skip when VX != NN."""
        state = set_registers(fresh_state, V3=0x10)
        initial_pc = state.pc

        state = execute(state, 0x4320)  # Skip if V3 != 0x20
        assert state.pc == initial_pc + 2

    def test_skip_if_not_equal_immediate_false(self, fresh_state):
        """4XNN - Should not skip when VX == NN."""
        state = set_registers(fresh_state, V3=0x20)
        initial_pc = state.pc

        state = execute(state, 0x4320)  # Skip if V3 != 0x20
        assert state.pc == initial_pc

    def test_skip_if_equal_register_true(self, fresh_state):
        """5XY0 - Should skip when VX == VY."""
        state = set_registers(fresh_state, V1=0x55, V2=0x55)
        initial_pc = state.pc

        state = execute(state, 0x5120)  # Skip if V1 == V2
        assert state.pc == initial_pc + 2

    def test_skip_if_equal_register_false(self, fresh_state):
        """5XY0 - Should not skip when VX != VY."""
        state = set_registers(fresh_state, V1=0x55, V2=0x44)
        initial_pc = state.pc

        state = execute(state, 0x5120)  # Skip if V1 == V2
        assert state.pc == initial_pc

    def test_skip_if_not_equal_register_true(self, fresh_state):
        """9XY0 - Should skip when VX != VY."""
        state = set_registers(fresh_state, V7=0xAA, V8=0xBB)
        initial_pc = state.pc

        state = execute(state, 0x9780)  # Skip if V7 != V8
        assert state.pc == initial_pc + 2

    def test_skip_if_not_equal_register_false(self, fresh_state):
        """9XY0 - Should not skip when VX == VY."""
        state = set_registers(fresh_state, V7=0xCC, V8=0xCC)
        initial_pc = state.pc

        state = execute(state, 0x9780)  # Skip if V7 != V8
        assert state.pc == initial_pc

    def test_skip_with_zero_values(self, fresh_state):
        """Test skip instructions with zero values."""
        state = fresh_state
        initial_pc = state.pc

        # V0 == 0, should skip
        state = execute(state, 0x3000)  # Skip if V0 == 0
        assert state.pc == initial_pc + 2

    def test_skip_boundary_values(self, fresh_state):
        """Test skip instructions with boundary values."""
        state = set_registers(fresh_state, V0=0xFF)
        initial_pc = state.pc

        state = execute(state, 0x30FF)  # Skip if V0 == 255
        assert state.pc == initial_pc + 2


class TestJumpWithOffset:
    """Test jump with offset with and without the quirk."""

    def test_jump_with_offset_v0(self, fresh_state):
        """BNNN - Jump with V0 offset."""
        state = execute(fresh_state, 0x6010)  # V0 = 0x10
        state = execute(state, 0xB250)  # Jump to 0x250 + V0
        assert state.pc == 0x260

    def test_jump_with_offset_vx(self, jump_quirk_state):
        """BNNN - Jump with VX offset when the quirk is enabled."""
        state = execute(jump_quirk_state, 0x6210)  # V2 = 0x10
        state = execute(state, 0xB250)  # Jump to 0x250 + V2
        assert state.pc == 0x260

    def test_jump_with_offset_wraps(self, fresh_state):
        """BNNN - The target stays inside the 4 KiB address space."""
        state = execute(fresh_state, 0x60FF)  # V0 = 0xFF
        state = execute(state, 0xBFF0)
        assert state.pc == (0xFF0 + 0xFF) & 0xFFF

    def test_jump_mode_comparison(self, rng):
        """Test that the quirk changes the offset register."""
        state_default = create_state(rng)
        state_default = execute(state_default, 0x6010)  # V0 = 0x10
        state_default = execute(state_default, 0x6230)  # V2 = 0x30
        state_default = execute(state_default, 0xB250)

        state_quirk = create_state(rng, Quirks(jump_offset_uses_vx=True))
        state_quirk = execute(state_quirk, 0x6010)  # V0 = 0x10
        state_quirk = execute(state_quirk, 0x6230)  # V2 = 0x30
        state_quirk = execute(state_quirk, 0xB250)

        assert state_default.pc == 0x260  # 0x250 + 0x10 (used V0)
        assert state_quirk.pc == 0x280  # 0x250 + 0x30 (used V2)


class TestKeySkips:
    """Test EX9E/EXA1."""

    def test_skip_if_key_pressed(self, fresh_state):
        """EX9E - Skip if key VX is pressed."""
        state = execute(fresh_state, 0x6005)  # V0 = 5
        state = state.replace(keypad=state.keypad.at[5].set(True))
        initial_pc = state.pc

        state = execute(state, 0xE09E)
        assert state.pc == initial_pc + 2

    def test_no_skip_if_key_released(self, fresh_state):
        """EX9E - No skip when key VX is up."""
        state = execute(fresh_state, 0x6005)
        initial_pc = state.pc

        state = execute(state, 0xE09E)
        assert state.pc == initial_pc

    def test_skip_if_key_not_pressed(self, fresh_state):
        """EXA1 - Skip if key VX is not pressed."""
        state = execute(fresh_state, 0x6005)
        initial_pc = state.pc

        state = execute(state, 0xE0A1)
        assert state.pc == initial_pc + 2

    def test_no_skip_if_key_held(self, fresh_state):
        """EXA1 - No skip when key VX is down."""
        state = execute(fresh_state, 0x6005)
        state = state.replace(keypad=state.keypad.at[5].set(True))
        initial_pc = state.pc

        state = execute(state, 0xE0A1)
        assert state.pc == initial_pc

    @pytest.mark.parametrize("instruction", [0xE000, 0xE09F, 0xE0FF])
    def test_unmapped_key_opcodes_are_ignored(self, fresh_state, instruction):
        """EXNN with any other NN does nothing."""
        state = fresh_state.replace(keypad=fresh_state.keypad.at[0].set(True))
        initial_pc = state.pc

        state = execute(state, instruction)
        assert state.pc == initial_pc
