from pathlib import Path
import io
import struct
import sys

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from ptv.envelope import PtvEnvelope  # noqa: E402
from ptv.errors import InvalidError, OverMaxError, PtvIOError, UnsupportedError  # noqa: E402
from ptv.unit import DataFlags, PtvUnit, VoiceFlags  # noqa: E402
from ptv.values import Key, Volume  # noqa: E402
from ptv.varint import encode_var  # noqa: E402
from ptv.voice import (  # noqa: E402
    HEADER_SIZE,
    SIGNATURE,
    VERSION,
    Ptvoice,
    read_ptvoice,
    write_ptvoice,
)
from ptv.wave import CoordinateWave, new_coordinate, new_oscillator  # noqa: E402


class AppendOnlySink:
    def __init__(self) -> None:
        self.chunks: list[bytes] = []

    def write(self, data: bytes) -> int:
        self.chunks.append(bytes(data))
        return len(data)

    def seekable(self) -> bool:
        return False


def _header(version: int = VERSION, data_len: int = 0) -> bytes:
    return SIGNATURE + struct.pack("<ii", version, data_len)


def _two_unit_voice() -> Ptvoice:
    return Ptvoice(
        units=[
            PtvUnit(basic_key=Key.A4.value, wave=new_coordinate([(0, 0)]), envelope=None),
            PtvUnit(
                basic_key=Key.approx_from_a4_semis(7.0).value,
                volume=96,
                pan_volume=32,
                tuning=1.5,
                flags=VoiceFlags.SMOOTH | VoiceFlags.BEAT_FIT,
                wave=new_oscillator([(1, 128), (2, 64), (4, 32)]),
                envelope=PtvEnvelope(points=[(0, 0), (96, 96), (500, 48)], release=100),
            ),
        ]
    )


def test_scenario_coordinate_wave_without_envelope() -> None:
    voice = Ptvoice(
        units=[PtvUnit(wave=CoordinateWave(points=[(0, 0)], x_width=256), envelope=None)]
    )
    decoded = Ptvoice.from_bytes(voice.to_bytes())

    unit = decoded.units[0]
    assert unit.data_flags & DataFlags.WAVE
    assert not unit.data_flags & DataFlags.ENVELOPE
    assert unit.wave == CoordinateWave(points=[(0, 0)], x_width=256)
    assert unit.envelope is None


def test_roundtrip_preserves_structure() -> None:
    voice = _two_unit_voice()
    voice.legacy_basic_key = 0x4500
    decoded = Ptvoice.from_bytes(voice.to_bytes())
    assert decoded == voice
    assert decoded.units[1].envelope.points == [(0, 0), (96, 96), (500, 48)]
    assert isinstance(decoded.units[1].wave, type(voice.units[1].wave))


def test_header_and_backpatched_length() -> None:
    data = _two_unit_voice().to_bytes()
    assert data[:8] == b"PTVOICE-"
    version, data_len = struct.unpack("<ii", data[8:HEADER_SIZE])
    assert version == VERSION
    assert data_len == len(data) - HEADER_SIZE


def test_minimal_voice_bytes() -> None:
    data = Ptvoice(units=[]).to_bytes()
    assert data == _header(data_len=4) + b"\x00\x00\x00\x00"


def test_write_leaves_cursor_at_end_and_returns_start() -> None:
    sink = io.BytesIO()
    sink.write(b"prefix")
    start = _two_unit_voice().write_to(sink)
    assert start == 6
    assert sink.tell() == len(sink.getvalue())
    data = sink.getvalue()[6:]
    assert struct.unpack("<i", data[12:16])[0] == len(data) - HEADER_SIZE


def test_append_only_sink_gets_identical_bytes() -> None:
    voice = _two_unit_voice()
    sink = AppendOnlySink()
    assert voice.write_to(sink) is None
    assert b"".join(sink.chunks) == voice.to_bytes()


def test_bad_signature_is_invalid() -> None:
    data = bytearray(Ptvoice().to_bytes())
    data[0:8] = b"PTNOISE-"
    with pytest.raises(InvalidError, match="signature"):
        Ptvoice.from_bytes(bytes(data))


def test_newer_version_is_unsupported_before_body_is_read() -> None:
    with pytest.raises(UnsupportedError):
        Ptvoice.from_bytes(_header(version=VERSION + 1))


def test_older_version_is_accepted() -> None:
    body = Ptvoice(units=[]).to_bytes()[HEADER_SIZE:]
    voice = Ptvoice.from_bytes(_header(version=20050000, data_len=len(body)) + body)
    assert voice.units == []


@pytest.mark.parametrize("declared", [0, 1, -1, 0x7FFFFFFF])
def test_declared_length_is_not_verified(declared: int) -> None:
    original = _two_unit_voice()
    data = bytearray(original.to_bytes())
    data[12:16] = struct.pack("<i", declared)
    assert Ptvoice.from_bytes(bytes(data)) == original


def test_trailing_bytes_are_left_unread() -> None:
    data = Ptvoice().to_bytes()
    source = io.BytesIO(data + b"tail")
    Ptvoice.from_read(source)
    assert source.read() == b"tail"


@pytest.mark.parametrize("reserved", [(1, 0), (0, 1), (-1, -1)])
def test_reserved_fields_must_be_zero(reserved: tuple[int, int]) -> None:
    body = encode_var(0) + encode_var(reserved[0]) + encode_var(reserved[1]) + encode_var(0)
    with pytest.raises(InvalidError, match="reserved"):
        Ptvoice.from_bytes(_header() + body)


def test_negative_unit_count_is_invalid() -> None:
    body = encode_var(0) * 3 + encode_var(-1)
    with pytest.raises(InvalidError, match="unit count"):
        Ptvoice.from_bytes(_header() + body)


def test_zero_units_accepted() -> None:
    assert Ptvoice.from_bytes(Ptvoice(units=[]).to_bytes()) == Ptvoice(units=[])


def test_truncated_voice_raises_io_error() -> None:
    data = _two_unit_voice().to_bytes()
    with pytest.raises(PtvIOError):
        Ptvoice.from_bytes(data[:-3])
    with pytest.raises(PtvIOError):
        Ptvoice.from_bytes(data[:5])


def test_batch_volume_scaling_then_reencode() -> None:
    voice = Ptvoice.from_bytes(_two_unit_voice().to_bytes())
    for unit in voice.units:
        unit.volume = (Volume(unit.volume) * 2.0).value
    decoded = Ptvoice.from_bytes(voice.to_bytes())
    assert [u.volume for u in decoded.units] == [256, 192]


def test_file_helpers(tmp_path: Path) -> None:
    path = tmp_path / "lead.ptvoice"
    voice = _two_unit_voice()
    write_ptvoice(path, voice)
    assert path.read_bytes() == voice.to_bytes()
    assert read_ptvoice(path) == voice


class HugeList(list):
    def __len__(self) -> int:
        return 2**31


def test_too_many_units_is_over_max() -> None:
    with pytest.raises(OverMaxError, match="too many units"):
        Ptvoice(units=HugeList()).to_bytes()


def test_envelope_x_outside_i32_fails_whole_voice() -> None:
    envelope = PtvEnvelope(points=[(0, 0), (1 << 40, 96)])
    with pytest.raises(OverMaxError):
        Ptvoice(units=[PtvUnit(envelope=envelope)]).to_bytes()


def test_fractional_tuning_survives_reencode() -> None:
    voice = Ptvoice(units=[PtvUnit(tuning=1.1), PtvUnit(tuning=0.95)])
    decoded = Ptvoice.from_bytes(voice.to_bytes())
    assert decoded == voice
    assert decoded.to_bytes() == voice.to_bytes()
