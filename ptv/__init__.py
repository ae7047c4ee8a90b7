"""Read and write pxtone ptvoice instrument data."""

from .envelope import PtvEnvelope  # noqa: F401
from .errors import (  # noqa: F401
    InvalidError,
    OverMaxError,
    PtvError,
    PtvIOError,
    UnsupportedError,
)
from .unit import DataFlags, PtvUnit, VoiceFlags  # noqa: F401
from .values import Key, PanVolume, Tuning, Volume  # noqa: F401
from .voice import (  # noqa: F401
    SIGNATURE,
    VERSION,
    Ptvoice,
    read_ptvoice,
    write_ptvoice,
)
from .wave import (  # noqa: F401
    WAVE_TYPES,
    CoordinateWave,
    OscillatorWave,
    PtvWave,
    default_sawtooth,
    default_sine,
    default_square,
    default_triangle,
    new_coordinate,
    new_oscillator,
    read_wave,
    write_wave,
)
