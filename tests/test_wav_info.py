import pytest

from _fakes import make_wav, peak_amplitude, streamed_wav
from asmr_mastering.audio.wav_info import estimate_pcm_duration, read_wav_info, try_read_wav_info


def test_read_wav_info_from_bytes() -> None:
    info = read_wav_info(make_wav(duration_sec=0.5, sample_rate=48_000, channels=2))
    assert info.sample_rate == 48_000
    assert info.channels == 2
    assert info.sample_width == 2
    assert info.frame_count == 24_000
    assert info.duration_sec == pytest.approx(0.5)


def test_try_read_wav_info_rejects_non_wav() -> None:
    assert try_read_wav_info(b"ID3\x03\x00not a wav file") is None
    assert try_read_wav_info(b"") is None


def test_estimate_pcm_duration_for_cd_quality_stereo() -> None:
    assert estimate_pcm_duration(176_400) == pytest.approx(1.0)
    assert estimate_pcm_duration(88_200, channels=1) == pytest.approx(1.0)


def test_peak_amplitude_tracks_signal_level() -> None:
    quiet = peak_amplitude(make_wav(duration_sec=0.1, amplitude=0.2))
    loud = peak_amplitude(make_wav(duration_sec=0.1, amplitude=0.8))
    assert quiet == pytest.approx(0.2, abs=0.01)
    assert loud == pytest.approx(0.8, abs=0.01)


def test_streamed_header_counts_frames_actually_present() -> None:
    data = streamed_wav(make_wav(duration_sec=0.5, sample_rate=44_100, channels=2))

    info = read_wav_info(data)

    assert info.frame_count == 22_050
    assert info.duration_sec == pytest.approx(0.5)
