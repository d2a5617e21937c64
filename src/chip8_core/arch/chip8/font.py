# src/chip8_core/arch/chip8/font.py
"""
組み込みフォントセット。

16進数字 0〜F の各グリフを 5 バイト（4x5 ピクセル、上位4ビットのみ使用）で表します。
各マシンは構築時とリセット時に、これを自身のメモリの先頭 [0x000, 0x050) にコピーします。
"""

# @intent:constant フォントの配置先アドレスと1グリフあたりのバイト数。
FONT_BASE_ADDRESS = 0x000
GLYPH_SIZE = 5

# @intent:constant 不変のフォントデータ。bytesとして保持し、共有されても書き換えられないことを保証します。
FONTSET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0, # 0
    0x20, 0x60, 0x20, 0x20, 0x70, # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0, # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0, # 3
    0x90, 0x90, 0xF0, 0x10, 0x10, # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0, # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0, # 6
    0xF0, 0x10, 0x20, 0x40, 0x40, # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0, # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0, # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90, # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0, # B
    0xF0, 0x80, 0x80, 0x80, 0xF0, # C
    0xE0, 0x90, 0x90, 0x90, 0xE0, # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0, # E
    0xF0, 0x80, 0xF0, 0x80, 0x80, # F
])

# @intent:utility_function 16進数字のグリフ先頭アドレスを返します。
def glyph_address(digit: int) -> int:
    return FONT_BASE_ADDRESS + digit * GLYPH_SIZE
