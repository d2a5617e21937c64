# tests/debugger/test_debugger.py
"""
chip8_core.debugger.debuggerモジュールの単体テスト。
Debuggerの実行制御、ブレークポイント管理、および条件チェック機能を検証します。
"""
import pytest
from unittest.mock import patch

from chip8_core.arch.chip8.cpu import create_chip8
from chip8_core.arch.chip8.state import Chip8CpuState
from chip8_core.core.snapshot import Snapshot, Operation, Metadata
from chip8_core.common.errors import StackUnderflowError
from chip8_core.debugger.debugger import (
    Debugger,
    BreakpointCondition,
    BreakpointConditionType,
    read_register,
)

# @intent:test_suite デバッガのブレークポイントと実行制御機能の検証。

# 0x200: LD V0, #$01
# 0x202: ADD V0, #$01
# 0x204: LD I, $300
# 0x206: LD [I], V0
# 0x208: JP $208
PROGRAM = bytes([0x60, 0x01, 0x70, 0x01, 0xA3, 0x00, 0xF0, 0x55, 0x12, 0x08])

class TestDebugger:
    """
    Debuggerの単体テスト。
    """
    @pytest.fixture
    def setup_debugger(self):
        cpu = create_chip8(program=PROGRAM)
        debugger = Debugger(cpu)
        return debugger, cpu, cpu.bus

    # @intent:test_case_add_remove_breakpoint ブレークポイントの追加と削除が正しく行われることを検証します。
    def test_add_remove_breakpoint(self, setup_debugger):
        debugger, _, _ = setup_debugger
        bp1 = BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x204)
        bp2 = BreakpointCondition(BreakpointConditionType.MEMORY_WRITE, address=0x300)

        debugger.add_breakpoint(bp1)
        debugger.add_breakpoint(bp2)
        debugger.add_breakpoint(bp1) # 重複追加は無視される
        assert debugger.get_breakpoints() == [bp1, bp2]

        debugger.remove_breakpoint(bp1)
        debugger.remove_breakpoint(bp1) # 存在しないブレークポイントの削除はエラーにならない
        assert debugger.get_breakpoints() == [bp2]

    def test_update_breakpoint(self, setup_debugger):
        debugger, _, _ = setup_debugger
        bp = BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x204)
        disabled = BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x204, enabled=False)
        debugger.add_breakpoint(bp)
        debugger.update_breakpoint(bp, disabled)
        assert debugger.get_breakpoints() == [disabled]

    # @intent:test_case_step_instruction step_instructionがcpu.stepを呼び出し、Snapshotを返すことを検証します。
    def test_step_instruction(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        with patch.object(cpu, 'step', return_value=Snapshot(
            state=Chip8CpuState(pc=0x202),
            operation=Operation(opcode_hex="0000", mnemonic="NOP"),
            bus_activity=[],
            metadata=Metadata(cycle_count=1)
        )) as mock_step:
            snapshot = debugger.step_instruction()
            mock_step.assert_called_once()
            assert snapshot.state.pc == 0x202
            assert debugger.get_last_snapshot() is snapshot
            assert debugger.get_history() == [snapshot]

    # @intent:test_case_pc_match_breakpoint PC_MATCHブレークポイントの手前で実行が止まることを検証します。
    def test_pc_match_breakpoint(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x204))
        executed = debugger.run()
        assert executed == 2
        assert cpu.get_state().pc == 0x204
        assert debugger.is_running() is False

        # 同じブレークポイント上から再開すると先へ進む
        executed = debugger.run()
        assert cpu.get_state().pc == 0x208

    def test_disabled_breakpoint_is_ignored(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x204, enabled=False))
        debugger.run()
        assert cpu.get_state().pc == 0x208

    # @intent:test_case_self_jump 自分自身へのジャンプで実行が停止することを検証します。
    def test_run_stops_on_self_jump(self, setup_debugger):
        debugger, cpu, bus = setup_debugger
        executed = debugger.run()
        assert executed == 5
        assert cpu.get_state().pc == 0x208
        assert bus.peek(0x300) == 0x02

    def test_run_max_steps(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        assert debugger.run(max_steps=3) == 3
        assert cpu.get_state().pc == 0x206

    def test_memory_write_breakpoint(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.MEMORY_WRITE, address=0x300))
        debugger.run()
        # 書き込みを行った命令の直後で停止する
        assert cpu.get_state().pc == 0x208
        assert debugger.get_last_snapshot().operation.opcode_hex == "F055"

    def test_memory_read_breakpoint(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.MEMORY_READ, address=0x203))
        debugger.run()
        assert cpu.get_state().pc == 0x204

    def test_register_value_breakpoint(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        debugger.add_breakpoint(BreakpointCondition(
            BreakpointConditionType.REGISTER_VALUE, value=0x02, register_name="V0"))
        debugger.run()
        assert cpu.get_state().pc == 0x204

    def test_register_change_breakpoint(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        debugger.add_breakpoint(BreakpointCondition(
            BreakpointConditionType.REGISTER_CHANGE, register_name="i"))
        debugger.run()
        assert cpu.get_state().i == 0x300
        assert cpu.get_state().pc == 0x206

    def test_run_propagates_core_errors(self):
        cpu = create_chip8(program=b"\x00\xEE") # 空スタックからのRET
        debugger = Debugger(cpu)
        with pytest.raises(StackUnderflowError):
            debugger.run()
        assert debugger.is_running() is False
        assert debugger.get_history() == []

    # @intent:test_case_step_back 巻き戻しでレジスタとメモリの両方が復元されることを検証します。
    def test_step_back_restores_memory_and_state(self, setup_debugger):
        debugger, cpu, bus = setup_debugger
        debugger.run()
        assert bus.peek(0x300) == 0x02

        snapshot = debugger.step_back() # JP を取り消す
        assert snapshot.state.pc == 0x208
        snapshot = debugger.step_back() # LD [I], V0 を取り消す
        assert bus.peek(0x300) == 0x00
        assert cpu.get_state().pc == 0x206
        assert cpu.get_state().i == 0x300

    def test_step_back_to_initial_state(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        debugger.step_instruction()
        assert debugger.step_back() is None
        assert cpu.get_state().pc == 0x200
        assert cpu.get_state().v[0] == 0
        assert debugger.step_back() is None

    def test_run_back_stops_at_breakpoint(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        debugger.run()
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x204))
        debugger.run_back()
        assert cpu.get_state().pc == 0x204
        assert debugger.is_running() is False

    def test_run_back_to_start(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        debugger.run()
        debugger.run_back()
        assert cpu.get_state().pc == 0x200
        assert debugger.get_history() == []

    # @intent:test_case_history_limit 履歴が上限で打ち切られ、その範囲内で巻き戻せることを検証します。
    def test_history_is_bounded(self):
        # 0x200: JP $202 / 0x202: JP $200 の無限ループ
        cpu = create_chip8(program=b"\x12\x02\x12\x00")
        debugger = Debugger(cpu, history_limit=8)
        assert debugger.run(max_steps=50) == 50
        history = debugger.get_history()
        assert len(history) == 8
        assert history[-1] is debugger.get_last_snapshot()

        for _ in range(7):
            assert debugger.step_back() is not None
        # 最古の履歴を取り消すと、押し出された直前の状態に戻る
        assert debugger.step_back() is None
        assert cpu.get_state().pc == 0x200
        assert debugger.get_history() == []
        assert debugger.step_back() is None

    def test_history_limit_must_be_positive(self):
        with pytest.raises(ValueError):
            Debugger(create_chip8(), history_limit=0)

    def test_step_back_rewinds_random_sequence(self):
        cpu = create_chip8(program=b"\xC0\xFF\xC0\xFF", rng_seed=99)
        debugger = Debugger(cpu)
        debugger.step_instruction()
        first = debugger.step_instruction().state.v[0]
        debugger.step_back()
        again = debugger.step_instruction().state.v[0]
        assert first == again

class TestReadRegister:
    def test_general_and_named_registers(self):
        state = Chip8CpuState()
        state.v[0xC] = 0x33
        state.delay_timer = 4
        assert read_register(state, "VC") == 0x33
        assert read_register(state, "vc") == 0x33
        assert read_register(state, "delay_timer") == 4
        assert read_register(state, "PC") == 0x200
        assert read_register(state, "vz") is None
        assert read_register(state, "nothing") is None
