# decoder.py
# Turn the content instance reported by the hydroponic node into engineering units.
#
# Hex layout (12 chars, big-endian uint16 each):
#   TTTT  temperature x10  (0x010B -> 26.7 °C)
#   PPPP  pH x10           (0x0046 -> 7.0)
#   SSSS  TDS ppm, raw     (0x01F4 -> 500)

from __future__ import annotations

import enum
import json
import math
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Union

HEX_RE = re.compile(r"^[0-9A-Fa-f]+$")
FIELD_RE = re.compile(r"^[0-9A-Fa-f]{4}$")
_WS_RE = re.compile(r"\s+")

FIELD_WIDTH = 4
MIN_HEX_LENGTH = 12


@dataclass(frozen=True)
class FieldSpec:
    name: str; unit: str; lo: float; hi: float; scale: float; digits: int


# Order matters: this is the on-wire order of the three fields.
FIELDS = [
    FieldSpec("temperature", "°C", 0.0, 60.0, 10, 1),
    FieldSpec("ph", "pH", 0.0, 14.0, 10, 2),
    FieldSpec("tds_level", "ppm", 0.0, 5000.0, 1, 0),
]

DIRECT_ALIASES: dict[str, tuple[str, ...]] = {
    "temperature": ("temperature", "temp"),
    "ph": ("ph", "pH"),
    "tds_level": ("tds", "TDS", "tdsLevel", "waterLevel"),
}


class FailureReason(str, enum.Enum):
    INVALID_LENGTH = "InvalidLength"
    INVALID_HEX_FIELD = "InvalidHexField"
    UNRECOGNIZED_FORMAT = "UnrecognizedFormat"


# -------------------- Payload variants --------------------

@dataclass(frozen=True)
class HexPayload:
    hex: str


@dataclass(frozen=True)
class WrappedHexPayload:
    data: str


@dataclass(frozen=True)
class DirectPayload:
    fields: Mapping[str, Any]


RawPayload = Union[HexPayload, WrappedHexPayload, DirectPayload]


# -------------------- Results --------------------

@dataclass(frozen=True)
class DecodedReading:
    temperature: float
    ph: float
    tds_level: float

    def as_dict(self) -> dict[str, float]:
        return {"temperature": self.temperature, "ph": self.ph, "tdsLevel": self.tds_level}


@dataclass(frozen=True)
class RangeWarning:
    """A decoded value outside the plausible range of a calibrated sensor."""

    field: str
    value: float
    low: float
    high: float
    unit: str = ""

    @property
    def message(self) -> str:
        return (
            f"{self.field} out of range: {self.value}{self.unit} "
            f"(expected {self.low}..{self.high}, sensor not calibrated?)"
        )


@dataclass(frozen=True)
class DecodeResult:
    reading: DecodedReading
    source: str = field(compare=False)
    warnings: tuple[RangeWarning, ...] = ()
    diagnostics: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def uncalibrated(self) -> bool:
        return bool(self.warnings)


@dataclass(frozen=True)
class DecodeFailure:
    reason: FailureReason
    detail: str = ""


# -------------------- Normalization --------------------

def _clean_hex(value: str) -> str:
    return _WS_RE.sub("", value).upper()


def classify_payload(content: Any) -> RawPayload | None:
    """Discriminate *content* into one of the three payload variants.

    Strings are tried as JSON first; text that is not a JSON object falls
    through to the bare hex variant when it looks like hex.
    """

    if isinstance(content, (bytes, bytearray)):
        content = content.decode("utf-8", errors="replace")

    if isinstance(content, str):
        try:
            parsed = json.loads(content)
        except (ValueError, RecursionError):
            parsed = None
        if isinstance(parsed, Mapping):
            content = parsed
        else:
            cleaned = _clean_hex(content)
            if cleaned and HEX_RE.match(cleaned):
                return HexPayload(cleaned)
            return None

    if isinstance(content, Mapping):
        data = content.get("data")
        if isinstance(data, str) and data:
            return WrappedHexPayload(data)
        for aliases in DIRECT_ALIASES.values():
            if any(key in content for key in aliases):
                return DirectPayload(content)
    return None


# -------------------- Decoding --------------------

def _check_range(spec: FieldSpec, value: float) -> RangeWarning | None:
    if value < spec.lo or value > spec.hi:
        return RangeWarning(spec.name, value, spec.lo, spec.hi, spec.unit)
    return None


def decode_hex(hex_string: str, *, source: str = "hex") -> DecodeResult | DecodeFailure:
    """Decode a ``TTTTPPPPSSSS`` string. Characters past the 12th are ignored."""

    clean = _clean_hex(hex_string)
    if len(clean) < MIN_HEX_LENGTH:
        return DecodeFailure(
            FailureReason.INVALID_LENGTH,
            f"expected at least {MIN_HEX_LENGTH} hex characters, got {len(clean)}",
        )

    values: dict[str, float] = {}
    raw: dict[str, dict[str, Any]] = {}
    warnings: list[RangeWarning] = []
    for i, spec in enumerate(FIELDS):
        chunk = clean[i * FIELD_WIDTH:(i + 1) * FIELD_WIDTH]
        if not FIELD_RE.match(chunk):
            return DecodeFailure(FailureReason.INVALID_HEX_FIELD, f"{spec.name}: {chunk!r} is not base-16")
        iv = int(chunk, 16)
        val = iv / spec.scale
        warning = _check_range(spec, val)
        if warning:
            warnings.append(warning)
        values[spec.name] = int(round(val)) if spec.digits == 0 else round(val, spec.digits)
        raw[spec.name] = {"hex": f"0x{chunk}", "raw": iv, "decoded": values[spec.name]}

    reading = DecodedReading(**values)
    diagnostics = {"input": clean, "fields": raw}
    return DecodeResult(reading, source, tuple(warnings), diagnostics)


def _coerce_float(value: Any) -> float:
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _decode_direct(fields: Mapping[str, Any]) -> DecodeResult:
    values: dict[str, float] = {}
    used: dict[str, str | None] = {}
    for name, aliases in DIRECT_ALIASES.items():
        key = next((k for k in aliases if fields.get(k) not in (None, "")), None)
        values[name] = _coerce_float(fields[key]) if key else 0.0
        used[name] = key
    return DecodeResult(DecodedReading(**values), "json_direct", (), {"keys": used})


def decode(payload: Any) -> DecodeResult | DecodeFailure:
    """Decode a raw content instance.

    Accepts a bare hex string, a JSON string or mapping wrapping hex under
    ``data``, or a JSON string or mapping with direct values. Never raises for
    malformed input; returns a :class:`DecodeFailure` instead.
    """

    variant = classify_payload(payload)
    if isinstance(variant, HexPayload):
        return decode_hex(variant.hex)
    if isinstance(variant, WrappedHexPayload):
        return decode_hex(variant.data, source="json_hex")
    if isinstance(variant, DirectPayload):
        return _decode_direct(variant.fields)
    return DecodeFailure(FailureReason.UNRECOGNIZED_FORMAT, f"unsupported payload: {str(payload)[:80]!r}")
