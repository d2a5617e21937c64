# src/chip8_core/arch/chip8/framebuffer.py
"""
モノクロのフレームバッファ。

ピクセルは行優先の真偽値リストとして `x + width * y` の位置に保持されます。
内容を変更するのは描画命令(DRW)と画面消去命令(CLS)のみです。
"""
from dataclasses import dataclass, field
from typing import List, Tuple

SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32

# @intent:responsibility 64x32 のピクセル状態を保持し、XORトグルと消去を提供します。
@dataclass
class FrameBuffer:
    width: int = SCREEN_WIDTH
    height: int = SCREEN_HEIGHT
    pixels: List[bool] = field(default_factory=lambda: [False] * (SCREEN_WIDTH * SCREEN_HEIGHT))

    def __post_init__(self):
        if len(self.pixels) != self.width * self.height:
            raise ValueError(
                f"Pixel buffer of length {len(self.pixels)} does not match {self.width}x{self.height}."
            )

    # @intent:responsibility 全ピクセルを消灯します。
    def clear(self) -> None:
        self.pixels[:] = [False] * (self.width * self.height)

    def get_pixel(self, x: int, y: int) -> bool:
        return self.pixels[(x % self.width) + self.width * (y % self.height)]

    # @intent:responsibility 指定座標のピクセルを反転し、反転前に点灯していたかを返します。
    # @intent:pre-condition 座標は画面サイズでラップアラウンドされます。
    def toggle(self, x: int, y: int) -> bool:
        idx = (x % self.width) + self.width * (y % self.height)
        was_set = self.pixels[idx]
        self.pixels[idx] = not was_set
        return was_set

    # @intent:responsibility 外部公開用の読み取り専用ビューを返します。
    def view(self) -> Tuple[bool, ...]:
        return tuple(self.pixels)

    # @intent:responsibility デバッグ表示用に、画面を文字列の行として返します。
    def to_text(self, on: str = "#", off: str = ".") -> str:
        rows = []
        for y in range(self.height):
            row = self.pixels[y * self.width:(y + 1) * self.width]
            rows.append("".join(on if p else off for p in row))
        return "\n".join(rows)
