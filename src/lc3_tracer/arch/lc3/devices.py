# src/lc3_tracer/arch/lc3/devices.py
"""
LC-3 コンソールデバイスとメモリマップドI/Oの整合処理。

コンソールはエンジンから見た外部協調者であり、1文字のブロッキング入力と
1文字のノンブロッキング出力のみを提供します。
"""
import sys
from abc import ABC, abstractmethod
from collections import deque
from typing import Iterable, List, Optional, TextIO, Union

from lc3_tracer.transport.bus import Bus
from lc3_tracer.arch.lc3.state import KBSR, DSR, DDR, DEVICE_READY

# @intent:responsibility コンソールデバイスの抽象インターフェースを定義します。
class Console(ABC):
    """
    エンジンが利用するコンソールデバイスの契約。
    read_charはLDIのKBDR特例からのみ、write_charはDDRの排出処理からのみ呼ばれます。
    """
    # @intent:responsibility 1文字を読み込みます。文字が得られるまで呼び出し元をブロックします。
    @abstractmethod
    def read_char(self) -> int:
        pass

    # @intent:responsibility 1文字を出力ストリームに追加します。
    @abstractmethod
    def write_char(self, char: int) -> None:
        pass

# @intent:responsibility 事前に用意した入力を返し、出力をメモリ上に蓄積するコンソール。
class ScriptedConsole(Console):
    """
    テストや非対話実行のためのコンソール。
    入力が尽きた状態でread_charが呼ばれるとEOFErrorを発生させます。
    """
    def __init__(self, input_data: Union[str, Iterable[int]] = ""):
        self._input: deque = deque()
        self._output: List[int] = []
        self.feed(input_data)

    # @intent:responsibility 入力キューに文字を追加します。
    def feed(self, input_data: Union[str, Iterable[int]]) -> None:
        if isinstance(input_data, str):
            self._input.extend(ord(c) & 0xFFFF for c in input_data)
        else:
            self._input.extend(int(c) & 0xFFFF for c in input_data)

    def read_char(self) -> int:
        if not self._input:
            raise EOFError("ScriptedConsole input exhausted.")
        return self._input.popleft()

    def write_char(self, char: int) -> None:
        self._output.append(char)

    @property
    def pending_input(self) -> int:
        return len(self._input)

    @property
    def output(self) -> List[int]:
        return list(self._output)

    def output_text(self) -> str:
        return "".join(chr(c) for c in self._output)

# @intent:responsibility テキストストリーム（既定は標準入出力）に接続するコンソール。
class StreamConsole(Console):
    def __init__(self, input_stream: Optional[TextIO] = None, output_stream: Optional[TextIO] = None):
        self._in = input_stream if input_stream is not None else sys.stdin
        self._out = output_stream if output_stream is not None else sys.stdout

    # @intent:rationale 入力終端では0（NUL）を返します。エンジンは入力が必ず得られる前提のため例外を伝播させません。
    def read_char(self) -> int:
        ch = self._in.read(1)
        return ord(ch) if ch else 0

    def write_char(self, char: int) -> None:
        self._out.write(chr(char))
        self._out.flush()

# @intent:responsibility 命令実行後のメモリマップドI/Oの整合処理を行います。
# @intent:post-condition DDRは0、KBSRとDSRはReady(0x8000)になります。
def reconcile_io(bus: Bus, console: Console) -> None:
    """
    DDRに非0の値があれば下位8bitをコンソールへ出力してDDRをクリアし、
    その後KBSRとDSRを常にReady状態に設定します。
    デバイス側の更新であるため、バスのアクティビティログには記録しません。
    """
    data = bus.peek(DDR)
    if data != 0:
        console.write_char(data & 0xFF)
        bus.load(DDR, 0x0000)

    bus.load(KBSR, DEVICE_READY)
    bus.load(DSR, DEVICE_READY)
