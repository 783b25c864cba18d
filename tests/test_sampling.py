import numpy as np
import pytest

from gramophone.audio import Audio, AudioLayout, LayoutError
from gramophone.sampling import output_length, resample


def _planar(x, channels=1, sr=100):
    return Audio(np.asarray(x, dtype=np.float32), channels, sr, AudioLayout.PLANAR)


def test_length_law():
    out = resample(_planar(np.random.default_rng(0).standard_normal(100)), 50)
    assert out.sample_rate == 50
    assert out.samples_per_channel == 50
    assert out.layout == AudioLayout.PLANAR


def test_output_length_floors():
    assert output_length(4410, 44100, 11025) == 1102
    assert output_length(100, 100, 33) == 33
    assert output_length(7, 44100, 11025) == 1


@pytest.mark.parametrize("target", [25, 50, 73, 100])
def test_constant_input_keeps_its_mean(target):
    out = resample(_planar(np.full(100, 0.25)), target)
    assert out.samples.mean() == pytest.approx(0.25, rel=1e-5)


def test_identity_rate():
    x = np.linspace(-1, 1, 100)
    out = resample(_planar(x), 100)
    np.testing.assert_allclose(out.samples, x, rtol=1e-6, atol=1e-7)


def test_accumulation_into_slots():
    # 5 -> 3 samples: r = 0.5, slots [0, 0, 1, 1, 2], scale 3/5
    out = resample(_planar([1, 2, 3, 4, 5], sr=5), 3)
    np.testing.assert_allclose(out.samples, np.array([3, 7, 5]) * 0.6, rtol=1e-6)


def test_channels_resampled_independently():
    x = np.concatenate([np.full(100, 1.0), np.full(100, -0.5)])
    out = resample(_planar(x, channels=2), 20)
    assert out.channels == 2
    assert out.samples_per_channel == 20
    assert out.channel(0).mean() == pytest.approx(1.0, rel=1e-5)
    assert out.channel(1).mean() == pytest.approx(-0.5, rel=1e-5)


def test_single_sample_channel():
    out = resample(_planar([0.5, 0.5], sr=2), 1)
    np.testing.assert_allclose(out.samples, [0.5])


def test_errors():
    with pytest.raises(LayoutError):
        resample(Audio(np.zeros(10, dtype=np.float32), 2, 100, AudioLayout.INTERLEAVED), 50)
    with pytest.raises(ValueError):
        resample(_planar(np.zeros(10)), 0)
    with pytest.raises(ValueError):
        # 10 samples at 1000Hz is 10ms, nothing left at 50Hz
        resample(_planar(np.zeros(10), sr=1000), 50)
