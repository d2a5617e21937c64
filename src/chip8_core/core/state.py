# chip8_core/core/state.py
"""
Core Layer (CPU状態)

このモジュールは、CPUの基本的な状態（レジスタ群）を保持するデータ構造を定義します。
"""
import copy
from dataclasses import dataclass

# @intent:responsibility CPUのレジスタ状態を保持します。アーキテクチャ固有のレジスタはこれを拡張します。
@dataclass
class CpuState:
    """
    CPUのレジスタ状態を保持するデータクラス。
    これは抽象的な基底状態であり、特定のCPUアーキテクチャに応じて拡張されます。
    """
    pc: int = 0x0000  # Program Counter
    sp: int = 0x0000  # Stack Pointer

    # @intent:responsibility 状態の独立したコピーを返します。
    # @intent:rationale サブクラスはリスト等の可変フィールドを持つため、Snapshotや履歴には深いコピーを渡します。
    def copy(self) -> "CpuState":
        return copy.deepcopy(self)
