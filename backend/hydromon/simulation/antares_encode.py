# antares_encode.py
# Scale and pack a reading into the 6-byte payload the hydroponic node posts (network byte order).

from __future__ import annotations
import struct

from hydromon.antares.decoder import FIELDS, FieldSpec

def _to_int(v: float, spec: FieldSpec) -> int:
    scaled = round(v * spec.scale)
    return max(0, min(65535, int(scaled)))

def encode_reading(temperature: float, ph: float, tds_level: float) -> bytes:
    """
    Payload order (6 bytes total):
      [temp x10 u16][ph x10 u16][tds u16]
    Values outside 0..65535 after scaling saturate.
    """
    values = {"temperature": temperature, "ph": ph, "tds_level": tds_level}
    ints = [_to_int(float(values[spec.name]), spec) for spec in FIELDS]
    return struct.pack(">HHH", *ints)

def to_hex(payload: bytes) -> str:
    return payload.hex().upper()
