import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from hydromon.antares.decoder import (  # noqa: E402
    DecodeFailure,
    DecodeResult,
    DirectPayload,
    FailureReason,
    HexPayload,
    WrappedHexPayload,
    classify_payload,
    decode,
)
from hydromon.simulation.antares_encode import encode_reading, to_hex  # noqa: E402


def _values(result):
    assert isinstance(result, DecodeResult), result
    return result.reading.as_dict()


def _warned_fields(result):
    return {w.field for w in result.warnings}


def test_calibrated_payload_decodes_without_warnings():
    result = decode("010B004601F4")

    assert _values(result) == {"temperature": 26.7, "ph": 7.0, "tdsLevel": 500}
    assert result.warnings == ()
    assert result.uncalibrated is False
    assert result.source == "hex"


def test_uncalibrated_ph_is_flagged_but_still_decoded():
    result = decode("010B013907F3")

    assert _values(result) == {"temperature": 26.7, "ph": 31.3, "tdsLevel": 2035}
    assert _warned_fields(result) == {"ph"}
    assert result.uncalibrated is True


def test_extreme_tds_is_flagged():
    result = decode("00000000FFFF")

    assert _values(result) == {"temperature": 0.0, "ph": 0.0, "tdsLevel": 65535}
    assert _warned_fields(result) == {"tds_level"}


def test_high_temperature_is_flagged():
    # 0x0262 = 610 -> 61.0 °C
    result = decode("0262004601F4")

    assert result.reading.temperature == 61.0
    assert _warned_fields(result) == {"temperature"}


def test_tds_level_is_an_integer():
    result = decode("010B004601F4")
    assert isinstance(result.reading.tds_level, int)


def test_short_payload_is_invalid_length():
    result = decode("ABC")

    assert isinstance(result, DecodeFailure)
    assert result.reason is FailureReason.INVALID_LENGTH


def test_lowercase_and_whitespace_are_accepted():
    assert decode(" 010b 0046 01f4\n") == decode("010B004601F4")


def test_trailing_characters_are_ignored():
    assert _values(decode("010B004601F4DEAD")) == _values(decode("010B004601F4"))


def test_json_wrapped_hex_matches_bare_hex():
    wrapped = decode('{"data":"010B004601F4"}')
    bare = decode("010B004601F4")

    assert wrapped == bare
    assert wrapped.source == "json_hex"


def test_wrapped_hex_as_mapping():
    assert decode({"data": "010B013907F3"}) == decode("010B013907F3")


def test_wrapped_non_hex_field_is_invalid_hex_field():
    result = decode({"data": "XYZW004601F4"})

    assert isinstance(result, DecodeFailure)
    assert result.reason is FailureReason.INVALID_HEX_FIELD
    assert "temperature" in result.detail


def test_wrapped_short_hex_is_invalid_length():
    result = decode('{"data": "010B"}')

    assert isinstance(result, DecodeFailure)
    assert result.reason is FailureReason.INVALID_LENGTH


def test_direct_values_are_passed_through_without_rounding():
    result = decode({"temperature": 25, "ph": 7.2, "tdsLevel": 450})

    assert _values(result) == {"temperature": 25, "ph": 7.2, "tdsLevel": 450}
    assert result.warnings == ()
    assert result.source == "json_direct"


def test_direct_values_keep_source_precision():
    result = decode({"temperature": 25.123, "ph": "6.789", "tdsLevel": 450.55})
    assert _values(result) == {"temperature": 25.123, "ph": 6.789, "tdsLevel": 450.55}


def test_direct_values_from_json_string_with_aliases():
    result = decode(json.dumps({"temp": "24.5", "pH": 6.8, "waterLevel": 610}))
    assert _values(result) == {"temperature": 24.5, "ph": 6.8, "tdsLevel": 610}


def test_direct_values_missing_or_unparsable_default_to_zero():
    result = decode({"temperature": "warm", "tds": None})

    assert _values(result) == {"temperature": 0.0, "ph": 0.0, "tdsLevel": 0.0}


def test_direct_values_out_of_range_do_not_warn():
    result = decode({"temperature": 80, "ph": 20, "tds": 9000})
    assert result.warnings == ()


@pytest.mark.parametrize(
    "payload",
    ["not-hex-and-not-json", "", "   ", None, 42, [1, 2, 3], {"foo": "bar"}, '{"foo": 1}', "[]"],
)
def test_unrecognized_payloads(payload):
    result = decode(payload)

    assert isinstance(result, DecodeFailure)
    assert result.reason is FailureReason.UNRECOGNIZED_FORMAT


def test_digit_only_hex_is_not_mistaken_for_json_number():
    # 0x1234 = 4660, 0x0056 = 86, 0x0789 = 1929
    result = decode("123400560789")
    assert _values(result) == {"temperature": 466.0, "ph": 8.6, "tdsLevel": 1929}


def test_decode_is_deterministic():
    assert decode("010B013907F3") == decode("010B013907F3")


def test_diagnostics_describe_each_field():
    result = decode("010B004601F4")

    assert result.diagnostics["input"] == "010B004601F4"
    fields = result.diagnostics["fields"]
    assert fields["temperature"] == {"hex": "0x010B", "raw": 267, "decoded": 26.7}
    assert fields["ph"]["raw"] == 70
    assert fields["tds_level"]["hex"] == "0x01F4"


def test_classify_payload_variants():
    assert classify_payload("010B004601F4") == HexPayload("010B004601F4")
    assert classify_payload('{"data": "010B004601F4"}') == WrappedHexPayload("010B004601F4")
    assert isinstance(classify_payload({"ph": 7}), DirectPayload)
    assert classify_payload("zzz") is None


@pytest.mark.parametrize("hex_payload", ["010B004601F4", "010B013907F3", "00000000FFFF", "012C004B0258"])
def test_reencoding_reproduces_the_same_reading(hex_payload):
    first = decode(hex_payload).reading
    again = decode(to_hex(encode_reading(first.temperature, first.ph, first.tds_level))).reading

    assert again == first


def test_oversized_integer_values_become_zero():
    result = decode('{"temperature": 1' + "0" * 400 + ', "ph": 7, "tds": 500}')

    assert isinstance(result, DecodeResult)
    assert result.reading.temperature == 0.0
    assert result.reading.ph == 7.0
    assert result.reading.tds_level == 500.0


def test_deeply_nested_json_is_unrecognized():
    result = decode("[" * 100000)

    assert isinstance(result, DecodeFailure)
    assert result.reason is FailureReason.UNRECOGNIZED_FORMAT


def test_empty_data_field_falls_back_to_direct_values():
    payload = {"data": "", "temperature": 25, "ph": 7.2, "tdsLevel": 450}

    assert isinstance(classify_payload(payload), DirectPayload)
    result = decode(payload)
    assert result.source == "json_direct"
    assert _values(result) == {"temperature": 25.0, "ph": 7.2, "tdsLevel": 450.0}
