"""
Minimal ICC v2.1 monitor profile writer.

The profile is an sRGB-like display profile (D50-adapted sRGB primaries,
gamma 2.2 TRCs) whose only job is to carry a ``vcgt`` tag: the per-channel
video card gamma ramps loaded into the display pipeline by the OS.

Layout:
    128-byte header | tag count | tag table (sig, offset, size) | tag data
Tag data is 4-byte aligned. All integers are big-endian.
"""

from __future__ import annotations

import struct
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import numpy as np

from curve2icc.config import TABLE_SIZE
from curve2icc.models.tables import ChannelTables

HEADER_SIZE = 128
PROFILE_VERSION = 0x02100000

D50_XYZ = (0.9642, 1.0, 0.8249)
SRGB_D50_PRIMARIES = {
    b"rXYZ": (0.4360747, 0.2225045, 0.0139322),
    b"gXYZ": (0.3850649, 0.7168786, 0.0971045),
    b"bXYZ": (0.1430804, 0.0606169, 0.7141733),
}
TRC_GAMMA = 2.2
COPYRIGHT = "No copyright, use freely"

_HEADER_FMT = ">I4sI4s4s4s6H4s4sI4sI8sI3i4s16s28x"
_TAG_ENTRY_FMT = ">4sII"
_VCGT_TABLE_TYPE = 0


class IccFormatError(ValueError):
    pass


def s15_fixed16(v: float) -> int:
    return int(round(v * 65536.0))


def _xyz_tag(xyz: Tuple[float, float, float]) -> bytes:
    return struct.pack(">4s4x3i", b"XYZ ", *(s15_fixed16(c) for c in xyz))


def _curv_gamma_tag(gamma: float) -> bytes:
    # count == 1: a single u8Fixed8 gamma exponent
    return struct.pack(">4s4xIH", b"curv", 1, int(round(gamma * 256.0)))


def _text_tag(text: str) -> bytes:
    return b"text\x00\x00\x00\x00" + text.encode("ascii", "replace") + b"\x00"


def _desc_tag(text: str) -> bytes:
    ascii_data = text.encode("ascii", "replace") + b"\x00"
    # empty unicode and scriptcode records, scriptcode body is a fixed 67 bytes
    return (
        struct.pack(">4s4xI", b"desc", len(ascii_data))
        + ascii_data
        + struct.pack(">IIHB", 0, 0, 0, 0)
        + b"\x00" * 67
    )


def _vcgt_tag(tables: ChannelTables) -> bytes:
    head = struct.pack(">4s4xIHHH", b"vcgt", _VCGT_TABLE_TYPE, 3, TABLE_SIZE, 2)
    return head + tables.data.astype(">u2").tobytes()


def _header(size: int, created: datetime) -> bytes:
    date = (created.year, created.month, created.day, created.hour, created.minute, created.second)
    return struct.pack(
        _HEADER_FMT,
        size,
        b"\x00" * 4,        # preferred CMM
        PROFILE_VERSION,
        b"mntr",
        b"RGB ",
        b"XYZ ",
        *date,
        b"acsp",
        b"\x00" * 4,        # platform
        0,                  # flags
        b"\x00" * 4,        # manufacturer
        0,                  # model
        b"\x00" * 8,        # attributes
        0,                  # perceptual intent
        *(s15_fixed16(c) for c in D50_XYZ),
        b"\x00" * 4,        # creator
        b"\x00" * 16,       # profile ID, unused in v2
    )


def _assemble(tags: List[Tuple[bytes, bytes]], created: datetime) -> bytes:
    table_size = 4 + len(tags) * struct.calcsize(_TAG_ENTRY_FMT)
    offset = HEADER_SIZE + table_size
    table = bytearray(struct.pack(">I", len(tags)))
    body = bytearray()
    for sig, data in tags:
        table += struct.pack(_TAG_ENTRY_FMT, sig, offset, len(data))
        padded = data + b"\x00" * ((4 - len(data) % 4) % 4)
        body += padded
        offset += len(padded)
    size = HEADER_SIZE + len(table) + len(body)
    return _header(size, created) + bytes(table) + bytes(body)


def build_profile_bytes(
    tables: ChannelTables,
    description: str,
    created: Optional[datetime] = None,
) -> bytes:
    if created is None:
        created = datetime.now(timezone.utc)
    tags: List[Tuple[bytes, bytes]] = [
        (b"desc", _desc_tag(description)),
        (b"cprt", _text_tag(COPYRIGHT)),
        (b"wtpt", _xyz_tag(D50_XYZ)),
    ]
    tags += [(sig, _xyz_tag(xyz)) for sig, xyz in SRGB_D50_PRIMARIES.items()]
    tags += [(sig, _curv_gamma_tag(TRC_GAMMA)) for sig in (b"rTRC", b"gTRC", b"bTRC")]
    tags.append((b"vcgt", _vcgt_tag(tables)))
    return _assemble(tags, created)


def write_profile(
    path: str | Path,
    tables: ChannelTables,
    description: str,
    created: Optional[datetime] = None,
) -> Path:
    out = Path(path).expanduser().resolve()
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(build_profile_bytes(tables, description, created=created))
    return out


def read_profile_tags(data: bytes) -> Dict[bytes, bytes]:
    if len(data) < HEADER_SIZE + 4:
        raise IccFormatError("Profile is shorter than an ICC header")
    if data[36:40] != b"acsp":
        raise IccFormatError("Missing 'acsp' profile signature")
    (declared,) = struct.unpack_from(">I", data, 0)
    if declared != len(data):
        raise IccFormatError(f"Header declares {declared} bytes, profile has {len(data)}")

    (count,) = struct.unpack_from(">I", data, HEADER_SIZE)
    entry_size = struct.calcsize(_TAG_ENTRY_FMT)
    tags: Dict[bytes, bytes] = {}
    for i in range(count):
        pos = HEADER_SIZE + 4 + i * entry_size
        if pos + entry_size > len(data):
            raise IccFormatError("Tag table runs past end of profile")
        sig, offset, size = struct.unpack_from(_TAG_ENTRY_FMT, data, pos)
        if offset + size > len(data):
            raise IccFormatError(f"Tag {sig!r} runs past end of profile")
        tags[sig] = data[offset : offset + size]
    return tags


def read_vcgt(data: bytes) -> ChannelTables:
    tags = read_profile_tags(data)
    raw = tags.get(b"vcgt")
    if raw is None:
        raise IccFormatError("Profile has no vcgt tag")
    type_sig, gamma_type, channels, entries, entry_size = struct.unpack_from(">4s4xIHHH", raw, 0)
    if type_sig != b"vcgt" or gamma_type != _VCGT_TABLE_TYPE:
        raise IccFormatError("Only table-form vcgt tags are supported")
    if (channels, entries, entry_size) != (3, TABLE_SIZE, 2):
        raise IccFormatError(
            f"Unsupported vcgt layout: {channels} channel(s) x {entries} entries x {entry_size} byte(s)"
        )
    start = struct.calcsize(">4s4xIHHH")
    values = np.frombuffer(raw, dtype=">u2", count=3 * TABLE_SIZE, offset=start)
    return ChannelTables(values.reshape(3, TABLE_SIZE).astype(np.uint16))


def read_description(data: bytes) -> str:
    raw = read_profile_tags(data).get(b"desc")
    if raw is None:
        raise IccFormatError("Profile has no desc tag")
    (count,) = struct.unpack_from(">I", raw, 8)
    return raw[12 : 12 + count].rstrip(b"\x00").decode("ascii")
