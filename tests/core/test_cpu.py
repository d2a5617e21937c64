# tests/core/test_cpu.py
"""
chip8_core.core.cpuモジュールの単体テスト。
"""
import pytest
from typing import Dict, List

from chip8_core.core.state import CpuState
from chip8_core.core.cpu import AbstractCpu
from chip8_core.core.snapshot import Snapshot, Operation
from chip8_core.transport.bus import Bus, RAM, BusAccessType
from chip8_core.common.errors import UnknownOpcodeError
from chip8_core.common.types import RegisterLayoutInfo, RegisterInfo, DisassemblyLine

# @intent:test_suite CPUの状態管理と抽象CPUの基本的な動作を検証します。

class StubCpu(AbstractCpu):
    """1バイト命令のみを持つテスト用CPU。0x00=NOP, 0x01=0x0020へ0xFFを書き込む, それ以外は未定義。"""
    def __init__(self, bus: Bus, initial_pc: int = 0x0000, initial_sp: int = 0x0000):
        self._initial_pc = initial_pc
        self._initial_sp = initial_sp
        super().__init__(bus)

    @property
    def has_io_port(self) -> bool:
        return False

    def _create_initial_state(self) -> CpuState:
        return CpuState(pc=self._initial_pc, sp=self._initial_sp)

    def _fetch(self) -> int:
        return self._bus.read(self._state.pc)

    def _decode(self, opcode: int) -> Operation:
        if opcode == 0x00:
            return Operation(opcode_hex="00", mnemonic="NOP", length=1)
        if opcode == 0x01:
            return Operation(opcode_hex="01", mnemonic="POKE", operands=["$0020"], length=1)
        raise UnknownOpcodeError(opcode, self._state.pc)

    def _execute(self, operation: Operation) -> None:
        if operation.mnemonic == "POKE":
            self._bus.write(0x0020, 0xFF)

    def get_register_map(self) -> Dict[str, int]:
        return {"PC": self._state.pc, "SP": self._state.sp}

    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [RegisterLayoutInfo("Test Group", [RegisterInfo("PC", 16), RegisterInfo("SP", 16)])]

    def get_flag_state(self) -> Dict[str, bool]:
        return {"Z": False}

    def disassemble(self, start_addr: int, length: int) -> List[DisassemblyLine]:
        return [(start_addr + i, "00", "NOP") for i in range(length)]

class TestCpuState:
    """
    CpuStateの単体テスト。
    """
    def test_cpu_state_init_default(self):
        state = CpuState()
        assert state.pc == 0x0000
        assert state.sp == 0x0000

    def test_cpu_state_copy_is_independent(self):
        state = CpuState(pc=0x1234, sp=0x0002)
        clone = state.copy()
        clone.pc = 0x0000
        assert state.pc == 0x1234
        assert clone == CpuState(pc=0x0000, sp=0x0002)

class TestAbstractCpu:
    """
    AbstractCpuの抽象メソッドと具象メソッドのテスト。
    """
    @pytest.fixture
    def setup_cpu(self):
        bus = Bus()
        ram = RAM(256)
        bus.register_device(0x0000, 0x00FF, ram)
        cpu = StubCpu(bus, initial_pc=0x0010, initial_sp=0x00F0)
        return cpu, bus, ram

    def test_abstract_cpu_init(self, setup_cpu):
        cpu, _, _ = setup_cpu
        state = cpu.get_state()
        assert state.pc == 0x0010
        assert state.sp == 0x00F0

    def test_abstract_cpu_reset(self, setup_cpu):
        cpu, _, _ = setup_cpu
        cpu.get_state().pc = 0x00AA
        cpu.reset()
        assert cpu.get_state().pc == 0x0010
        assert cpu.get_state().sp == 0x00F0
        assert cpu.get_cycle_count() == 0

    # @intent:test_case_step step()がPCを進め、バスアクセスを含むSnapshotを返すことを検証します。
    def test_abstract_cpu_step(self, setup_cpu):
        cpu, bus, _ = setup_cpu
        bus.write(0x0010, 0x01)
        bus.get_and_clear_activity_log()

        snapshot = cpu.step()

        assert cpu.get_state().pc == 0x0011
        assert isinstance(snapshot, Snapshot)
        assert snapshot.state == cpu.get_state()
        assert snapshot.operation.mnemonic == "POKE"
        assert snapshot.metadata.cycle_count == 1
        assert snapshot.metadata.symbol_info == "POKE $0020"
        assert [a.access_type for a in snapshot.bus_activity] == [BusAccessType.READ, BusAccessType.WRITE]
        assert snapshot.bus_activity[1].address == 0x0020
        assert snapshot.bus_activity[1].previous_data == 0x00

    # @intent:test_case_snapshot_isolation Snapshotの状態が以後の実行で変化しないことを検証します。
    def test_snapshot_state_is_a_copy(self, setup_cpu):
        cpu, _, _ = setup_cpu
        snapshot = cpu.step()
        cpu.get_state().pc = 0x0080
        assert snapshot.state.pc == 0x0011

    def test_symbol_info_uses_symbol_map(self, setup_cpu):
        cpu, _, _ = setup_cpu
        cpu.set_symbol_map({"start": 0x0010})
        snapshot = cpu.step()
        assert snapshot.metadata.symbol_info == "start: NOP"
        assert cpu.get_symbol_map() == {"start": 0x0010}

    # @intent:test_case_error 失敗した命令はPCを巻き戻し、例外を伝播することを検証します。
    def test_step_error_restores_pc(self, setup_cpu):
        cpu, bus, _ = setup_cpu
        bus.write(0x0010, 0x7F)
        with pytest.raises(UnknownOpcodeError):
            cpu.step()
        assert cpu.get_state().pc == 0x0010
        assert bus.get_and_clear_activity_log() == []

    def test_restore_state(self, setup_cpu):
        cpu, _, _ = setup_cpu
        saved = CpuState(pc=0x0042, sp=0x0001)
        cpu.restore_state(saved)
        assert cpu.get_state() == saved
        assert cpu.get_state() is not saved
