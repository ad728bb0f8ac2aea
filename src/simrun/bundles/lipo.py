"""
Architecture inspection for app executables.

Reads Mach-O headers directly, both thin binaries and fat (universal)
binaries, and checks the slices against what a device can run.
"""

import logging
import struct
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO, FrozenSet, List, Tuple

from ..core.exceptions import IncompatibleArchitectureError

if TYPE_CHECKING:
    from ..devices.device import Device
    from .app import App

logger = logging.getLogger(__name__)

FAT_MAGIC = 0xCAFEBABE
FAT_MAGIC_64 = 0xCAFEBABF
MH_MAGIC = 0xFEEDFACE
MH_MAGIC_64 = 0xFEEDFACF

CPU_ARCH_ABI64 = 0x01000000
CPU_ARCH_ABI64_32 = 0x02000000
CPU_SUBTYPE_MASK = 0xFF000000

CPU_TYPE_X86 = 7
CPU_TYPE_X86_64 = CPU_TYPE_X86 | CPU_ARCH_ABI64
CPU_TYPE_ARM = 12
CPU_TYPE_ARM64 = CPU_TYPE_ARM | CPU_ARCH_ABI64
CPU_TYPE_ARM64_32 = CPU_TYPE_ARM | CPU_ARCH_ABI64_32

# Java class files share the fat magic; real universal binaries have few slices.
MAX_FAT_ARCHES = 30

_ARM_SUBTYPES = {
    6: "armv6",
    9: "armv7",
    10: "armv7f",
    11: "armv7s",
    12: "armv7k",
    13: "armv8",
    14: "armv6m",
    15: "armv7m",
    16: "armv7em",
}
_ARM64_SUBTYPES = {0: "arm64", 1: "arm64v8", 2: "arm64e"}
_X86_64_SUBTYPES = {3: "x86_64", 8: "x86_64h"}


def arch_name(cputype: int, cpusubtype: int) -> str:
    """Map a Mach-O cputype/cpusubtype pair to its lipo name."""
    subtype = cpusubtype & ~CPU_SUBTYPE_MASK & 0xFFFFFFFF
    if cputype == CPU_TYPE_X86:
        return "i386"
    if cputype == CPU_TYPE_X86_64:
        return _X86_64_SUBTYPES.get(subtype, "x86_64")
    if cputype == CPU_TYPE_ARM:
        return _ARM_SUBTYPES.get(subtype, "arm")
    if cputype == CPU_TYPE_ARM64:
        return _ARM64_SUBTYPES.get(subtype, "arm64")
    if cputype == CPU_TYPE_ARM64_32:
        return "arm64_32"
    return f"cputype({cputype})"


def _read_exact(f: BinaryIO, size: int, path: Path) -> bytes:
    data = f.read(size)
    if len(data) != size:
        raise ValueError(f"truncated Mach-O header in '{path}'")
    return data


def read_mach_o_arches(path: Path) -> List[str]:
    """Slice names of the Mach-O file at ``path``, in file order.

    Raises:
        ValueError: if the file is not a Mach-O binary.
        OSError: if the file cannot be read.
    """
    with open(path, "rb") as f:
        magic_bytes = _read_exact(f, 4, path)
        big = struct.unpack(">I", magic_bytes)[0]
        little = struct.unpack("<I", magic_bytes)[0]

        if big in (FAT_MAGIC, FAT_MAGIC_64):
            nfat_arch = struct.unpack(">I", _read_exact(f, 4, path))[0]
            if nfat_arch == 0 or nfat_arch > MAX_FAT_ARCHES:
                raise ValueError(f"'{path}' is not a Mach-O universal binary")
            entry_size = 32 if big == FAT_MAGIC_64 else 20
            arches = []
            for _ in range(nfat_arch):
                entry = _read_exact(f, entry_size, path)
                cputype, cpusubtype = struct.unpack(">iI", entry[:8])
                arches.append(arch_name(cputype, cpusubtype))
            return arches

        for endian, magic in ((">", big), ("<", little)):
            if magic in (MH_MAGIC, MH_MAGIC_64):
                cputype, cpusubtype = struct.unpack(
                    f"{endian}iI", _read_exact(f, 8, path)
                )
                return [arch_name(cputype, cpusubtype)]

    raise ValueError(f"'{path}' is not a Mach-O binary")


class Lipo:
    """Inspects the architecture slices of an app's executable."""

    def __init__(self, app: "App") -> None:
        self.app = app

    @property
    def binary_path(self) -> Path:
        return self.app.executable_path

    def info(self) -> FrozenSet[str]:
        """Architecture slices present in the executable.

        Raises:
            IncompatibleArchitectureError: if the executable is missing or is
                not a Mach-O binary.
        """
        path = self.binary_path
        try:
            arches = read_mach_o_arches(path)
        except (OSError, ValueError) as e:
            raise IncompatibleArchitectureError(
                str(path), found=[], expected=[], reason=str(e)
            ) from e

        logger.debug(f"Binary '{path}' contains slices {sorted(arches)}")
        return frozenset(arches)

    def expect_compatible_arch(self, device: "Device") -> Tuple[str, ...]:
        """Ensure the executable can run on ``device``.

        Returns the compatible slices, sorted.

        Raises:
            IncompatibleArchitectureError: if no slice is compatible.
        """
        arches = self.info()
        required = device.required_architectures
        compatible = arches & required
        if not compatible:
            raise IncompatibleArchitectureError(
                str(self.binary_path), found=arches, expected=required
            )
        return tuple(sorted(compatible))
