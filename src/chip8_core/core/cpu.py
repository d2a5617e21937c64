# chip8_core/core/cpu.py
"""
Core Layer (抽象CPU)

このモジュールは、CPUの基本的な状態管理と命令サイクルの駆動に関する抽象化を提供します。
具体的な命令の振る舞いはInstruction Layerに移譲されます。
"""
import logging
from abc import ABC, abstractmethod
from typing import Optional, List, Dict

from chip8_core.transport.bus import Bus
from chip8_core.core.snapshot import Snapshot, Operation, Metadata
from chip8_core.core.state import CpuState
from chip8_core.common.errors import Chip8Error
from chip8_core.common.types import SymbolMap, RegisterLayoutInfo, DisassemblyLine

logger = logging.getLogger(__name__)

# @intent:responsibility 抽象CPUの基本機能とインターフェースを定義します。
class AbstractCpu(ABC):
    """
    全てのCPUエミュレーションの基底となる抽象クラス。
    Busとのインターフェース、基本的な状態管理、命令サイクルの抽象化を提供します。
    """
    # @intent:responsibility CPUの状態とバスへの参照を初期化します。
    # @intent:pre-condition `bus`は有効なBusオブジェクトである必要があります。
    def __init__(self, bus: Bus):
        self._bus = bus
        self._state: CpuState = self._create_initial_state()
        self._cycle_count: int = 0
        self._symbol_map: SymbolMap = {}
        self._reverse_symbol_map: Dict[int, str] = {}
        # @intent:rationale Stateオブジェクトの直接操作を避けるため、protectedな命名規則を採用。
        #                  外部からのアクセスは`get_state()`メソッドを介して行う。

    # @intent:responsibility I/O空間（Port I/O）をサポートするかどうかを返します。
    @property
    @abstractmethod
    def has_io_port(self) -> bool:
        """
        このCPUが独立したI/O空間（ポート入出力）をサポートしているか返します。
        """
        pass

    # @intent:responsibility 接続されているバスを返します。
    @property
    def bus(self) -> Bus:
        return self._bus

    # @intent:responsibility シンボルマップを設定します。
    def set_symbol_map(self, symbol_map: SymbolMap) -> None:
        """
        シンボルマップ（名前とアドレスの対応表）を設定します。
        """
        self._symbol_map = symbol_map
        # 逆引きマップを作成して、アドレスからラベルを素早く引けるようにする
        self._reverse_symbol_map = {addr: name for name, addr in symbol_map.items()}

    def get_symbol_map(self) -> SymbolMap:
        return self._symbol_map

    # @intent:responsibility 初期状態のCpuStateオブジェクトを生成します。
    # @intent:rationale 各CPUアーキテクチャで初期状態が異なるため、抽象メソッドとして定義します。
    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        """
        CPUの初期状態を生成して返します。
        """
        pass

    # @intent:responsibility CPUをリセットし、初期状態に戻します。
    def reset(self) -> None:
        """
        CPUのPCとSP、およびその他の状態を初期値にリセットします。
        """
        self._state = self._create_initial_state()
        self._cycle_count = 0

    # @intent:responsibility 現在のCPUの状態を返します。
    def get_state(self) -> CpuState:
        """
        現在のCPUの状態（レジスタ値など）を返します。
        返される値は内部状態そのものであり、変更はCPUに反映されます。
        """
        return self._state

    # @intent:responsibility 保存された状態へCPUを復元します（Debuggerのstep_backで使用）。
    def restore_state(self, state: CpuState) -> None:
        self._state = state.copy()

    # @intent:responsibility 累計サイクル数を返します。
    def get_cycle_count(self) -> int:
        return self._cycle_count

    # @intent:responsibility メモリから次の命令をフェッチします。
    @abstractmethod
    def _fetch(self) -> int:
        """
        現在のPCからメモリの次の命令をフェッチし、その値を返します。
        """
        pass

    # @intent:responsibility フェッチした命令語を解析し、Operationオブジェクトに変換します。
    @abstractmethod
    def _decode(self, opcode: int) -> Operation:
        pass

    # @intent:responsibility デコードされた命令を実行し、CPUの状態を更新します。
    @abstractmethod
    def _execute(self, operation: Operation) -> None:
        pass

    # @intent:responsibility CPUを1命令サイクル進め、その結果のスナップショットを返します。
    # @intent:rationale Template Methodパターンを採用し、共通の実行フロー（ログクリア→フェッチ→デコード→PC更新→実行→Snapshot生成）を定義します。
    # @intent:post-condition Chip8Errorが送出された場合、PCは命令の先頭アドレスに戻され、その命令の効果は残りません。
    def step(self) -> Snapshot:
        """
        CPUを1命令サイクル進め、その時点でのCPUとバスの状態を含むSnapshotオブジェクトを返します。
        """
        # 1. 前処理: 前サイクルまでの残存ログを破棄
        self._bus.get_and_clear_activity_log()
        initial_pc = self._state.pc

        # 2. HALT判定 (Hook)
        halt_snapshot = self._handle_halt(initial_pc)
        if halt_snapshot:
            return halt_snapshot

        try:
            # 3. フェッチ
            opcode = self._fetch()

            # 4. デコード
            operation = self._decode(opcode)

            # 5. PC更新 (Hook)
            self._update_pc(operation)

            # 6. 実行
            self._execute(operation)
        except Chip8Error as e:
            logger.debug("step failed at %#05x: %s", initial_pc, e)
            self._state.pc = initial_pc
            self._bus.get_and_clear_activity_log()
            raise

        # 7. 後処理 & Snapshot生成
        return self._create_snapshot(initial_pc, operation)

    # @intent:responsibility HALT状態の場合の処理を行います。
    # @intent:return HALT中であればその状態のSnapshot、そうでなければNone。
    def _handle_halt(self, current_pc: int) -> Optional[Snapshot]:
        return None

    # @intent:responsibility 命令実行前にPCを更新します。
    def _update_pc(self, operation: Operation) -> None:
        """
        命令実行前のPC更新。デフォルトは命令長分進める。
        """
        self._state.pc = (self._state.pc + operation.length) & 0xFFFF

    # @intent:responsibility スナップショットを生成します。
    def _create_snapshot(self, initial_pc: int, operation: Operation) -> Snapshot:
        """
        実行結果からSnapshotオブジェクトを生成する共通ロジック。
        """
        bus_activity = self._bus.get_and_clear_activity_log()
        self._cycle_count += operation.cycle_count

        symbol_label = self._reverse_symbol_map.get(initial_pc, "")
        symbol_info = f"{symbol_label}: " if symbol_label else ""
        symbol_info += f"{operation.mnemonic}"
        if operation.operands:
            symbol_info += " " + ", ".join(operation.operands)

        return Snapshot(
            # 以後の命令でSnapshotの内容が変化しないよう、実行後の状態をコピーして保持する
            state=self._state.copy(),
            operation=operation,
            metadata=Metadata(cycle_count=self._cycle_count, symbol_info=symbol_info),
            bus_activity=bus_activity
        )

    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        """
        現在のレジスタ値を辞書形式で返す。
        """
        pass

    @abstractmethod
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        """
        レジスタをどのように配置・グループ化すべきかの定義を返す。
        """
        pass

    @abstractmethod
    def get_flag_state(self) -> Dict[str, bool]:
        pass

    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[DisassemblyLine]:
        """
        指定されたメモリ範囲を逆アセンブルし、(address, hex_bytes, mnemonic) のタプルリストを返す。
        """
        pass
