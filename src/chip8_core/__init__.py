"""
CHIP-8 インタプリタコア。

各層（transport / core / arch / debugger / config）はサブパッケージとして提供されます。
"""
__version__ = "0.1.0"
