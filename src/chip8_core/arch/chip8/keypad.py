# src/chip8_core/arch/chip8/keypad.py
"""
16キーの入力状態。ホストが set_key で更新し、命令(SKP/SKNP/LD Vx,K)が参照します。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from chip8_core.common.errors import InvalidKeyIndexError

NUM_KEYS = 16

# @intent:responsibility 16個のキーの押下状態を保持し、範囲外のキー番号を拒否します。
@dataclass
class Keypad:
    keys: List[bool] = field(default_factory=lambda: [False] * NUM_KEYS)

    @staticmethod
    def _check_index(index: int) -> None:
        if not 0 <= index < NUM_KEYS:
            raise InvalidKeyIndexError(index)

    # @intent:responsibility キーの押下状態を設定します。
    # @intent:pre-condition 0 <= index < 16。範囲外ならInvalidKeyIndexErrorを送出します。
    def set_key(self, index: int, pressed: bool) -> None:
        self._check_index(index)
        self.keys[index] = bool(pressed)

    def is_pressed(self, index: int) -> bool:
        self._check_index(index)
        return self.keys[index]

    # @intent:responsibility 押下中のキーのうち最小の番号を返します。押されていなければNone。
    def first_pressed(self) -> Optional[int]:
        for index, pressed in enumerate(self.keys):
            if pressed:
                return index
        return None
