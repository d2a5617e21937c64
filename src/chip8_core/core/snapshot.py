# chip8_core/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、CPUとバスの完全な状態を記録した不変のデータ構造を定義します。
フロントエンドへの情報提供と、デバッグ時の状態記録に用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from chip8_core.core.state import CpuState
from chip8_core.transport.bus import BusAccessType, BusAccess


# @intent:responsibility 実行された命令の詳細を記録します。
@dataclass(frozen=True) # 不変データ構造
class Operation:
    """
    実行された命令の詳細（HEX、ニーモニック、オペランド）を記録するデータクラス。
    """
    opcode_hex: str # 例: "6A12"
    mnemonic: str # 例: "LD"
    operands: List[str] = field(default_factory=list) # 例: ["VA", "#$12"]
    operand_bytes: List[int] = field(default_factory=list) # 生の命令バイト
    cycle_count: int = 1 # 命令実行に要するサイクル数
    length: int = 2 # 命令のバイト長

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True) # 不変データ構造
class Metadata:
    """
    実行に関するメタデータ（累計サイクル数、シンボル情報など）を記録するデータクラス。
    """
    cycle_count: int
    symbol_info: Optional[str] = None # 例: "main_loop: JP $200"

# @intent:responsibility ある一時点におけるCPUとバスの完全な状態を不変に記録します。
@dataclass(frozen=True) # 不変データ構造
class Snapshot:
    """
    ある一時点における、CPUとバスの完全な状態を記録した不変のデータ構造。
    """
    state: CpuState
    operation: Operation
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)
