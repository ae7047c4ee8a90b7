from pathlib import Path
import sys

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from ptv.values import Key, PanVolume, Tuning, Volume  # noqa: E402


def test_key_constants() -> None:
    assert Key.A4.value == 0x6000
    assert Key.C4.value == 87 * 256
    assert Key.from_a4_offset(0) == Key.A4
    assert Key.from_a4_offset(-9 * 256) == Key.C4


def test_key_semitone_conversions() -> None:
    assert Key.approx_from_semis(96.0) == Key.A4
    assert Key.approx_from_a4_semis(-9.0) == Key.C4
    assert Key.C4.as_semis() == 87.0
    assert Key.C4.as_a4_semis() == -9.0
    assert Key.C4.as_a4_offset() == -9 * 256


def test_key_hertz_conversions() -> None:
    assert Key.A4.as_hertz() == 440.0
    assert Key.C4.as_hertz() == pytest.approx(261.62556, rel=1e-6)
    assert Key.approx_from_hertz(440.0) == Key.A4
    assert Key.approx_from_hertz(880.0) == Key.from_a4_offset(12 * 256)
    with pytest.raises(ValueError):
        Key.approx_from_hertz(0.0)


def test_volume_ratio_and_scaling() -> None:
    assert Volume().value == 128
    assert Volume(64).as_ratio() == 0.5
    assert Volume.from_ratio(0.75) == Volume(96)
    assert (Volume(128) * 2) == Volume(256)
    assert (Volume(100) * 0.5) == Volume(50)


@pytest.mark.parametrize(
    "pan, separate, ratios",
    [
        (PanVolume.LEFT, (64, 0), (1.0, 0.0)),
        (PanVolume.CENTER, (64, 64), (1.0, 1.0)),
        (PanVolume.RIGHT, (0, 64), (0.0, 1.0)),
    ],
)
def test_pan_volume_conversions(pan: PanVolume, separate, ratios) -> None:
    assert pan.as_separate() == separate
    assert pan.as_ratios() == ratios
    assert PanVolume.from_separate(*separate) == pan
    assert PanVolume.from_ratios(*ratios) == pan


def test_defaults() -> None:
    assert PanVolume() == PanVolume.CENTER
    assert Tuning().value == 1.0


def test_key_from_rounded_hertz_lands_on_note() -> None:
    assert Key.approx_from_hertz(261.62555) == Key.C4
    assert Key.approx_from_hertz(261.62556) == Key.C4
