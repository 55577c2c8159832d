"""Simulated machine state seen by the monitor.

Register file: x86 general purpose registers with their 16/8-bit aliases
plus ``pc``. Physical memory: flat, little-endian, starting at
``PMEM_BASE``; guest images are loaded at ``IMAGE_START`` by default.
"""

import numpy as np

from .errors import MemoryAccessError, ImageLoadError
from .expr import evaluate, evaluate_expression

PMEM_BASE = 0x00000000
PMEM_SIZE = 128 * 1024 * 1024    # 128MB
IMAGE_START = 0x100000
WORD_MASK = 0xFFFFFFFF

GPR32 = ('eax', 'ecx', 'edx', 'ebx', 'esp', 'ebp', 'esi', 'edi')
GPR16 = ('ax', 'cx', 'dx', 'bx', 'sp', 'bp', 'si', 'di')
GPR8 = ('al', 'cl', 'dl', 'bl', 'ah', 'ch', 'dh', 'bh')

# name -> (index into GPR32, bit shift, mask)
_ALIASES = {}
for _i, _name in enumerate(GPR32):
    _ALIASES[_name] = (_i, 0, 0xFFFFFFFF)
for _i, _name in enumerate(GPR16):
    _ALIASES[_name] = (_i, 0, 0xFFFF)
for _i, _name in enumerate(GPR8):
    # al..bl are the low bytes of eax..ebx, ah..bh the high bytes
    _ALIASES[_name] = (_i & 3, 8 if _i >= 4 else 0, 0xFF)


class Registers:
    """x86 register file with sub-register aliases and ``pc``."""

    def __init__(self):
        self.gpr = [0] * len(GPR32)
        self.pc = 0

    def get(self, name: str) -> int:
        """Value of register *name*; KeyError if unknown."""
        name = name.lower()
        if name in ('pc', 'eip'):
            return self.pc
        idx, shift, mask = _ALIASES[name]
        return (self.gpr[idx] >> shift) & mask

    def set(self, name: str, value: int):
        """Write *value* into register *name*, truncated to its width."""
        name = name.lower()
        if name in ('pc', 'eip'):
            self.pc = value & WORD_MASK
            return
        idx, shift, mask = _ALIASES[name]
        cleared = self.gpr[idx] & ~(mask << shift) & WORD_MASK
        self.gpr[idx] = cleared | ((value & mask) << shift)

    def resolve(self, name):
        """Register lookup for the expression evaluator: ``(value, ok)``."""
        try:
            return self.get(name), True
        except KeyError:
            return 0, False

    def dump(self):
        """List of (name, value) for ``info r``."""
        return [(name, self.gpr[i]) for i, name in enumerate(GPR32)] + [('pc', self.pc)]


class Memory:
    """Flat little-endian physical memory backed by a uint8 array."""

    def __init__(self, size: int = PMEM_SIZE, base: int = PMEM_BASE):
        self.base = base
        self.size = size
        self.data = np.zeros(size, dtype=np.uint8)

    def _offset(self, addr, width):
        off = addr - self.base
        if width not in (1, 2, 4):
            raise ValueError(f"Unsupported access width: {width}")
        if off < 0 or off + width > self.size:
            raise MemoryAccessError(
                f"address 0x{addr:08x} is out of bound "
                f"[0x{self.base:08x}, 0x{self.base + self.size - 1:08x}]")
        return off

    def read(self, addr: int, width: int) -> int:
        """Read *width* bytes (1, 2 or 4) at *addr*, little-endian."""
        off = self._offset(addr, width)
        chunk = self.data[off:off + width]
        return int(chunk.view(f'<u{width}')[0]) if width > 1 else int(chunk[0])

    def write(self, addr: int, width: int, value: int):
        """Write the low *width* bytes of *value* at *addr*."""
        off = self._offset(addr, width)
        raw = (value & ((1 << (8 * width)) - 1)).to_bytes(width, 'little')
        self.data[off:off + width] = np.frombuffer(raw, dtype=np.uint8)

    def load(self, data: bytes, addr: int = IMAGE_START) -> int:
        """Copy *data* into memory at *addr*. Returns bytes loaded."""
        off = addr - self.base
        if off < 0 or off + len(data) > self.size:
            raise ImageLoadError(
                f"Image of {len(data):,} bytes does not fit at 0x{addr:08x}")
        self.data[off:off + len(data)] = np.frombuffer(data, dtype=np.uint8)
        return len(data)

    def load_file(self, path: str, addr: int = IMAGE_START) -> int:
        """Load a raw binary image file at *addr*."""
        try:
            with open(path, 'rb') as f:
                data = f.read()
        except OSError as e:
            raise ImageLoadError(f"Cannot read image '{path}': {e}") from e
        return self.load(data, addr)


class Machine:
    """Register file + memory, exposing the evaluator's two collaborators."""

    def __init__(self, mem_size: int = PMEM_SIZE, mem_base: int = PMEM_BASE):
        self.regs = Registers()
        self.mem = Memory(mem_size, mem_base)

    def resolve_register(self, name):
        return self.regs.resolve(name)

    def read_memory(self, addr, width):
        return self.mem.read(addr, width)

    def evaluate(self, text):
        """``(value, ok)`` of *text* against this machine."""
        return evaluate(text, self.resolve_register, self.read_memory)

    def evaluate_or_raise(self, text):
        return evaluate_expression(text, self.resolve_register, self.read_memory)
