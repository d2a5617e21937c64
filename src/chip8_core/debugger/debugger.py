# chip8_core/debugger/debugger.py
"""
デバッガモジュール。

コアエンジンの実行を制御し、ユーザーが指定した条件（ブレークポイント）で
実行を中断させる責務を負います。
"""
import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Any, Deque, List, Optional

from chip8_core.core.cpu import AbstractCpu
from chip8_core.core.snapshot import Snapshot, BusAccessType
from chip8_core.core.state import CpuState
from chip8_core.common.errors import Chip8Error

logger = logging.getLogger(__name__)

# @intent:constant 既定で保持する実行履歴の命令数。
DEFAULT_HISTORY_LIMIT = 1000

# @intent:responsibility ブレークポイントの条件タイプを定義します。
class BreakpointConditionType(Enum):
    PC_MATCH = "PC_MATCH"               # プログラムカウンタが特定のアドレスに一致
    MEMORY_READ = "MEMORY_READ"         # 特定のアドレスが読み込まれた
    MEMORY_WRITE = "MEMORY_WRITE"       # 特定のアドレスに書き込まれた
    REGISTER_VALUE = "REGISTER_VALUE"   # 特定のレジスタが特定の値になった
    REGISTER_CHANGE = "REGISTER_CHANGE" # 特定のレジスタの値が変化した

# @intent:responsibility ブレークポイントをトリガーする条件を定義します。
@dataclass(frozen=True)
class BreakpointCondition:
    """
    ブレークポイントがヒットするための条件を定義するデータクラス。
    register_name には状態の属性名（"pc", "i", "sp", "delay_timer" など）か、
    汎用レジスタ名 "v0"〜"vf" を指定します。
    """
    condition_type: BreakpointConditionType
    value: Optional[int] = None           # PC_MATCH, REGISTER_VALUEで使用
    address: Optional[int] = None         # MEMORY_READ, MEMORY_WRITEで使用
    register_name: Optional[str] = None   # REGISTER_VALUE, REGISTER_CHANGEで使用
    enabled: bool = True                  # 有効/無効状態

# @intent:utility_function 状態からレジスタ値を取り出します。"v0"〜"vf" は汎用レジスタとして解決します。
def read_register(state: CpuState, name: str) -> Optional[Any]:
    lowered = name.lower()
    if len(lowered) == 2 and lowered[0] == "v" and hasattr(state, "v"):
        try:
            return state.v[int(lowered[1], 16)]
        except ValueError:
            return None
    return getattr(state, lowered, None)

# @intent:responsibility コアエンジンの実行制御とブレークポイント管理を行います。
class Debugger:
    """
    CPUの実行を制御し、ブレークポイントの管理を行うクラス。
    """
    def __init__(self, cpu: AbstractCpu, history_limit: int = DEFAULT_HISTORY_LIMIT):
        if history_limit <= 0:
            raise ValueError("history_limit must be a positive integer.")
        self._cpu = cpu
        self._breakpoints: List[BreakpointCondition] = []
        self._running: bool = False
        self._previous_state: CpuState = self._cpu.get_state().copy()
        self._last_snapshot: Optional[Snapshot] = None
        # @intent:responsibility 直近 history_limit 命令分の実行履歴を保持し、タイムトラベルデバッグをサポートします。
        self._history: Deque[Snapshot] = deque(maxlen=history_limit)
        # @intent:responsibility 履歴が尽きた時に戻るための状態を保持します。
        #                        履歴から押し出されたSnapshotの状態で更新され、常に最古の履歴の直前を指します。
        self._initial_state: CpuState = self._cpu.get_state().copy()

    def add_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition not in self._breakpoints:
            self._breakpoints.append(condition)

    def update_breakpoint(self, old_condition: BreakpointCondition, new_condition: BreakpointCondition) -> None:
        if old_condition in self._breakpoints:
            idx = self._breakpoints.index(old_condition)
            self._breakpoints[idx] = new_condition

    def remove_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition in self._breakpoints:
            self._breakpoints.remove(condition)

    def get_breakpoints(self) -> List[BreakpointCondition]:
        return list(self._breakpoints)

    def get_history(self) -> List[Snapshot]:
        return list(self._history)

    def is_running(self) -> bool:
        return self._running

    def _pc_breakpoint_hit(self, pc: int) -> bool:
        return any(
            bp.enabled and bp.condition_type == BreakpointConditionType.PC_MATCH and bp.value == pc
            for bp in self._breakpoints
        )

    def _check_other_breakpoints(self, snapshot: Snapshot) -> bool:
        """
        Snapshotに基づいてPC_MATCH以外のブレークポイントをチェックします。
        """
        current_state = snapshot.state

        for bp in self._breakpoints:
            if not bp.enabled:
                continue

            if bp.condition_type == BreakpointConditionType.MEMORY_READ:
                for access in snapshot.bus_activity:
                    if access.access_type == BusAccessType.READ and access.address == bp.address:
                        return True
            elif bp.condition_type == BreakpointConditionType.MEMORY_WRITE:
                for access in snapshot.bus_activity:
                    if access.access_type == BusAccessType.WRITE and access.address == bp.address:
                        return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_VALUE:
                if bp.register_name and read_register(current_state, bp.register_name) == bp.value:
                    return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_CHANGE:
                if bp.register_name and self._previous_state is not None:
                    before = read_register(self._previous_state, bp.register_name)
                    after = read_register(current_state, bp.register_name)
                    if before != after:
                        return True
        return False

    def step_instruction(self) -> Snapshot:
        """
        CPUを1命令分実行し、その結果のSnapshotを返します。
        例外はそのまま呼び出し元へ伝播し、履歴には追加されません。
        """
        self._previous_state = self._cpu.get_state().copy()
        snapshot = self._cpu.step()
        self._last_snapshot = snapshot
        if len(self._history) == self._history.maxlen:
            self._initial_state = self._history[0].state
        self._history.append(snapshot)
        return snapshot

    def step_back(self) -> Optional[Snapshot]:
        """
        実行履歴を1つ戻り、CPUとメモリの状態を復元します。
        """
        if not self._history:
            return None

        # 1. 履歴から最新のスナップショットを取り出し、削除する
        snapshot_to_revert = self._history.pop()

        # 2. メモリ書き込みの取り消し (Undo)
        # バスアクティビティを逆順にスキャンし、書き込み操作があれば元に戻す
        bus = self._cpu.bus
        for access in reversed(snapshot_to_revert.bus_activity):
            if access.access_type == BusAccessType.WRITE and access.previous_data is not None:
                bus.load(access.address, access.previous_data)

        # 3. CPU状態の復元
        if self._history:
            previous_snapshot = self._history[-1]
            self._cpu.restore_state(previous_snapshot.state)
            self._last_snapshot = previous_snapshot
            return previous_snapshot

        self._cpu.restore_state(self._initial_state)
        self._last_snapshot = None
        return None

    def get_last_snapshot(self) -> Optional[Snapshot]:
        return self._last_snapshot

    # @intent:responsibility 自分自身へのジャンプ（CHIP-8で慣用的な停止ループ）かどうかを判定します。
    @staticmethod
    def _is_self_jump(snapshot: Snapshot) -> bool:
        op = snapshot.operation
        address = getattr(op, "address", None)
        return op.mnemonic == "JP" and address is not None and snapshot.state.pc == address

    def run(self, max_steps: Optional[int] = None) -> int:
        """
        ブレークポイント、停止ループ、またはmax_stepsに到達するまでCPUの実行を継続します。
        実行した命令数を返します。
        """
        self._running = True
        executed = 0

        # 現在のPCにブレークポイントがあっても、最初の1命令は実行して先へ進む
        if self._pc_breakpoint_hit(self._cpu.get_state().pc):
            self.step_instruction()
            executed += 1

        while self._running:
            if max_steps is not None and executed >= max_steps:
                self._running = False
                logger.info("Run stopped after %d steps", executed)
                break

            current_pc = self._cpu.get_state().pc
            if self._pc_breakpoint_hit(current_pc):
                self._running = False
                logger.info("Breakpoint hit at PC: %#06x", current_pc)
                break

            try:
                snapshot = self.step_instruction()
            except Chip8Error:
                self._running = False
                raise
            executed += 1

            if self._is_self_jump(snapshot):
                self._running = False
                logger.info("Program halted in self-jump at PC: %#06x", snapshot.state.pc)
                break

            if self._check_other_breakpoints(snapshot):
                self._running = False
                logger.info("Breakpoint hit at PC: %#06x", snapshot.state.pc)

        return executed

    def run_back(self) -> None:
        """
        CPUの実行を逆方向（過去）へ連続的に戻します。
        """
        self._running = True

        while self._running:
            snapshot = self.step_back()

            if snapshot is None:
                self._running = False
                logger.info("Reached start of history.")
                return

            if self._pc_breakpoint_hit(snapshot.state.pc):
                self._running = False
                logger.info("Reverse Breakpoint hit at PC: %#06x", snapshot.state.pc)
                return

            # 戻った時点のSnapshot（＝その命令実行直後の状態）で評価する
            if self._check_other_breakpoints(snapshot):
                self._running = False
                logger.info("Reverse Breakpoint hit at PC: %#06x", snapshot.state.pc)

    def stop(self) -> None:
        self._running = False
