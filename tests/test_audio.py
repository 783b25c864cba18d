"""
Tests for the Audio buffer model: validity, channel access, copying and layout conversion.
"""
import numpy as np
import pytest

from gramophone.audio import Audio, AudioLayout, InvalidAudioError, LayoutError


def _planar(channels=3, spc=5, sr=8000):
    x = np.arange(channels * spc, dtype=np.float32)
    return Audio(x, channels, sr, AudioLayout.PLANAR)


def test_derived_sizes():
    a = Audio(np.zeros(2 * 4410, dtype=np.float32), 2, 44100)
    assert a.samples_per_channel == 4410
    assert a.duration_seconds == pytest.approx(0.1)
    assert a.layout == AudioLayout.INTERLEAVED


@pytest.mark.parametrize("channels, sr, n", [(0, 44100, 4), (2, 0, 4), (2, 44100, 0), (2, 44100, 3)])
def test_invalid_buffers(channels, sr, n):
    a = Audio(np.zeros(n, dtype=np.float32), channels, sr)
    assert not a.is_valid
    with pytest.raises(InvalidAudioError):
        a.validate()


def test_bad_layout_is_invalid():
    a = Audio(np.zeros(4, dtype=np.float32), 2, 44100, layout="planar")
    assert not a.is_valid


def test_channel_access_planar():
    a = _planar()
    np.testing.assert_array_equal(a.channel(1), [5, 6, 7, 8, 9])
    # view, not copy
    a.channel(2)[0] = -1.0
    assert a.samples[10] == -1.0


def test_channel_access_errors():
    a = _planar()
    with pytest.raises(IndexError):
        a.channel(3)
    with pytest.raises(IndexError):
        a.channel(-1)
    a.interleave()
    with pytest.raises(LayoutError):
        a.channel(0)


def test_copy_does_not_alias():
    a = _planar()
    b = a.copy()
    b.samples[0] = 42.0
    assert a.samples[0] == 0.0
    assert (b.channels, b.sample_rate, b.layout) == (a.channels, a.sample_rate, a.layout)


def test_deinterleave_index_mapping():
    # two frames of (L, R)
    a = Audio(np.array([1, 2, 3, 4, 5, 6], dtype=np.float32), 2, 100)
    a.deinterleave()
    assert a.layout == AudioLayout.PLANAR
    np.testing.assert_array_equal(a.samples, [1, 3, 5, 2, 4, 6])
    a.interleave()
    assert a.layout == AudioLayout.INTERLEAVED
    np.testing.assert_array_equal(a.samples, [1, 2, 3, 4, 5, 6])


def test_layout_round_trip_both_ways():
    rng = np.random.default_rng(1)
    x = rng.standard_normal(4 * 37).astype(np.float32)

    a = Audio(x.copy(), 4, 48000, AudioLayout.INTERLEAVED)
    a.deinterleave()
    a.interleave()
    np.testing.assert_array_equal(a.samples, x)

    b = Audio(x.copy(), 4, 48000, AudioLayout.PLANAR)
    b.interleave()
    b.deinterleave()
    np.testing.assert_array_equal(b.samples, x)


def test_layout_conversion_noops():
    a = Audio(np.array([1, 2, 3], dtype=np.float32), 1, 100)
    a.deinterleave()
    assert a.layout == AudioLayout.PLANAR
    np.testing.assert_array_equal(a.samples, [1, 2, 3])

    p = _planar()
    before = p.samples.copy()
    p.deinterleave()
    np.testing.assert_array_equal(p.samples, before)


def test_frames_from_both_layouts():
    a = Audio.from_frames(np.array([[1, 2], [3, 4], [5, 6]], dtype=np.float32), 22050)
    assert (a.channels, a.sample_rate, a.layout) == (2, 22050, AudioLayout.INTERLEAVED)
    np.testing.assert_array_equal(a.samples, [1, 2, 3, 4, 5, 6])
    expected = [[1, 2], [3, 4], [5, 6]]
    np.testing.assert_array_equal(a.frames(), expected)
    a.deinterleave()
    np.testing.assert_array_equal(a.frames(), expected)


def test_from_frames_mono_vector():
    a = Audio.from_frames(np.array([0.1, 0.2, 0.3]), 8000)
    assert a.channels == 1
    assert a.samples.dtype == np.float32
    assert a.frames().shape == (3, 1)


def test_list_samples_become_float32_array():
    a = Audio([1.0, 3.0, 5.0, 7.0], 2, 44100)
    assert a.is_valid
    assert isinstance(a.samples, np.ndarray)
    assert a.samples.dtype == np.float32
    a.deinterleave()
    np.testing.assert_array_equal(a.samples, [1.0, 5.0, 3.0, 7.0])


def test_float32_storage_is_borrowed_and_copy_keeps_dtype():
    x = np.array([0.1, 0.2, 0.3, 0.4], dtype=np.float32)
    a = Audio(x, 2, 8000)
    assert a.samples is x
    b = Audio(np.array([0.1, 0.2], dtype=np.float64), 1, 8000).copy()
    assert b.samples.dtype == np.float32
