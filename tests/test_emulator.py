"""Tests for fetch, cycle, timers, keypad and program loading."""

import jax.numpy as jnp
import pytest
from chip8vm import (
    fetch, cycle, tick_timers, set_keypad, load_program, load_rom, read_rom,
    run_n_instruction, run_cycles, run_frame, MAX_PROGRAM_SIZE, PROGRAM_START,
    ProgramNotFoundError, ProgramTooLargeError, ProgramLoadError,
)


class TestFetch:
    """Test instruction fetch."""

    def test_fetch_is_big_endian(self, fresh_state):
        state = load_program(fresh_state, bytes([0xA2, 0xF0]))

        state, instruction = fetch(state)

        assert instruction == 0xA2F0
        assert state.pc == PROGRAM_START + 2

    def test_fetch_wraps_at_end_of_memory(self, fresh_state):
        state = fresh_state.replace(
            pc=fresh_state.pc.at[()].set(0xFFF),
            memory=fresh_state.memory.at[0xFFF].set(0x12).at[0x000].set(0x34),
        )

        _, instruction = fetch(state)

        assert instruction == 0x1234


class TestProgramLoading:
    """Test loading programs into memory."""

    def test_load_program_at_0x200(self, fresh_state):
        state = load_program(fresh_state, bytes([0x60, 0x05, 0x70, 0x03]))
        assert [int(b) for b in state.memory[0x200:0x205]] == [0x60, 0x05, 0x70, 0x03, 0]
        assert state.memory[0x1FF] == 0

    def test_load_program_empty(self, fresh_state):
        state = load_program(fresh_state, b"")
        assert (state.memory == fresh_state.memory).all()

    def test_load_program_maximum_size(self, fresh_state):
        state = load_program(fresh_state, bytes([0xAB]) * MAX_PROGRAM_SIZE)
        assert state.memory[0xFFF] == 0xAB

    def test_load_program_too_large(self, fresh_state):
        with pytest.raises(ProgramTooLargeError) as excinfo:
            load_program(fresh_state, bytes(MAX_PROGRAM_SIZE + 1))
        assert excinfo.value.size == 3585
        assert isinstance(excinfo.value, ValueError)

    def test_load_rom_from_file(self, fresh_state, tmp_path):
        rom = tmp_path / "test.ch8"
        rom.write_bytes(bytes([0x00, 0xE0, 0x12, 0x00]))

        state = load_rom(fresh_state, rom)

        assert [int(b) for b in state.memory[0x200:0x204]] == [0x00, 0xE0, 0x12, 0x00]

    def test_load_rom_missing_file(self, fresh_state, tmp_path):
        with pytest.raises(ProgramNotFoundError):
            load_rom(fresh_state, tmp_path / "missing.ch8")

    def test_read_rom_directory(self, tmp_path):
        with pytest.raises(ProgramLoadError):
            read_rom(tmp_path)


class TestTimers:
    """Test timer ticks."""

    def test_tick_decrements(self, fresh_state):
        state = fresh_state.replace(
            delay_timer=jnp.array(3, dtype=jnp.uint8),
            sound_timer=jnp.array(1, dtype=jnp.uint8),
        )

        state = tick_timers(state)

        assert state.delay_timer == 2
        assert state.sound_timer == 0

    def test_tick_stops_at_zero(self, fresh_state):
        state = tick_timers(tick_timers(fresh_state))
        assert state.delay_timer == 0
        assert state.sound_timer == 0
        assert state.delay_timer.dtype == jnp.uint8

    def test_cycles_do_not_tick(self, fresh_state):
        state = load_program(fresh_state, bytes([0x60, 0x0A, 0xF0, 0x15, 0x70, 0x01, 0x12, 0x04]))
        state = run_n_instruction(state, 10)
        assert state.delay_timer == 10


class TestKeypad:
    """Test handing key state to the core."""

    def test_set_keypad(self, fresh_state):
        keys = [False] * 16
        keys[0xA] = True
        state = set_keypad(fresh_state, keys)
        assert state.keypad[0xA]
        assert int(jnp.sum(state.keypad)) == 1

    def test_set_keypad_wrong_length(self, fresh_state):
        with pytest.raises(ValueError):
            set_keypad(fresh_state, [True] * 15)


class TestRunning:
    """Test running programs end to end."""

    def test_two_cycles(self, fresh_state):
        """6005 then 7003 leaves V0 = 8 and pc past both instructions."""
        state = load_program(fresh_state, bytes([0x60, 0x05, 0x70, 0x03]))

        state = cycle(cycle(state))

        assert state.V[0] == 8
        assert state.pc == 0x204

    def test_wait_for_key_repeats(self, fresh_state):
        """FX0A holds pc in place until a key goes down."""
        state = load_program(fresh_state, bytes([0xF3, 0x0A, 0x12, 0x02]))

        for _ in range(5):
            state = cycle(state)
            assert state.pc == 0x200
            assert state.V[3] == 0

        state = set_keypad(state, [i == 9 for i in range(16)])
        state = cycle(state)

        assert state.V[3] == 9
        assert state.pc == 0x202

    def test_subroutine_program(self, fresh_state):
        """A call to a subroutine that sets a register and returns."""
        program = bytes([
            0x22, 0x06,  # 200: call 0x206
            0x61, 0x02,  # 202: V1 = 2
            0x12, 0x04,  # 204: jump to self
            0x60, 0x07,  # 206: V0 = 7
            0x00, 0xEE,  # 208: return
        ])
        state = load_program(fresh_state, program)

        state = run_n_instruction(state, 4)

        assert state.V[0] == 7
        assert state.V[1] == 2
        assert state.pc == 0x204
        assert state.stack.pointer == 0

    def test_run_cycles_with_progress(self, fresh_state):
        state = load_program(fresh_state, bytes([0x70, 0x01, 0x12, 0x00]))

        state = run_cycles(state, 20, progress=True, desc="Test")

        assert state.V[0] == 10

    def test_run_cycles_matches_scan(self, fresh_state):
        state = load_program(fresh_state, bytes([0x70, 0x01, 0x12, 0x00]))
        assert run_cycles(state, 8).V[0] == run_n_instruction(state, 8).V[0]

    def test_run_frame_ticks_once(self, fresh_state):
        program = bytes([0x60, 0x05, 0xF0, 0x18, 0x12, 0x04])  # ST = 5, loop
        state = load_program(fresh_state, program)

        state = run_frame(state, 8)

        assert state.sound_timer == 4
        assert state.pc == 0x204
