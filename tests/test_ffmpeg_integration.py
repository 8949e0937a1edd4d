import asyncio
import json
import shutil
import subprocess
from pathlib import Path

import pytest

from _fakes import make_wav, peak_amplitude
from asmr_mastering.audio.runner import MediaProcessRunner
from asmr_mastering.audio.wav_info import read_wav_info
from asmr_mastering.config import MixerConfig
from asmr_mastering.mixing.models import BinauralSettings, MixingOptions, OutputFormat, QualityTier
from asmr_mastering.mixing.service import AudioMixerService

pytestmark = pytest.mark.skipif(
    shutil.which("ffmpeg") is None or shutil.which("ffprobe") is None,
    reason="ffmpeg/ffprobe not installed",
)


def _service(tmp_path: Path) -> AudioMixerService:
    return AudioMixerService(config=MixerConfig(temp_dir=tmp_path / "audio", engine_timeout_sec=120))


def _has_encoder(name: str) -> bool:
    completed = subprocess.run(
        ["ffmpeg", "-hide_banner", "-encoders"],
        capture_output=True,
        text=True,
        check=False,
    )
    return name in completed.stdout


def test_mix_two_mono_inputs_to_stereo_wav(tmp_path: Path) -> None:
    service = _service(tmp_path)
    options = MixingOptions(voice_volume=0.7, soundscape_volume=0.3, fade_in_duration=3, fade_out_duration=5)

    result = asyncio.run(
        service.mix_voice_and_soundscape(
            make_wav(duration_sec=10.0, frequency=440.0),
            make_wav(duration_sec=10.0, frequency=220.0),
            options,
        )
    )

    info = read_wav_info(result.output_buffer)
    assert info.channels == 2
    assert info.sample_rate == 44_100
    assert info.duration_sec <= 10.05
    assert result.metadata.duration == pytest.approx(info.duration_sec)
    assert 1 <= result.quality_report.overall_score <= 10
    assert list((tmp_path / "audio").iterdir()) == []


def test_voice_volume_is_monotonic(tmp_path: Path) -> None:
    service = _service(tmp_path)
    voice = make_wav(duration_sec=1.0, amplitude=0.8)
    silence = make_wav(duration_sec=1.0, amplitude=0.0)

    async def _peak(volume: float) -> float:
        result = await service.mix_voice_and_soundscape(
            voice, silence, MixingOptions(voice_volume=volume, soundscape_volume=1.0)
        )
        return peak_amplitude(result.output_buffer)

    quiet = asyncio.run(_peak(0.3))
    loud = asyncio.run(_peak(0.8))
    assert loud >= quiet


def test_binaural_effects_render_valid_wav(tmp_path: Path) -> None:
    service = _service(tmp_path)
    settings = BinauralSettings(enabled=True, spatial_width=1.5, left_delay=20, right_delay=10, reverb_amount=0.3)

    output = asyncio.run(service.apply_binaural_effects(make_wav(duration_sec=1.0, channels=2), settings))

    info = read_wav_info(output)
    assert info.channels == 2
    assert info.sample_rate == 44_100


def test_optimize_and_normalize_produce_pcm(tmp_path: Path) -> None:
    service = _service(tmp_path)
    source = make_wav(duration_sec=3.0, channels=2)

    optimized = asyncio.run(service.optimize_for_asmr(source))
    normalized = asyncio.run(service.normalize_audio(optimized, target_lufs=-16))

    assert read_wav_info(optimized).sample_rate == 44_100
    assert read_wav_info(normalized).sample_rate == 44_100
    assert read_wav_info(normalized).sample_width == 2
    assert optimized != source


def test_optimize_twice_differs_from_once(tmp_path: Path) -> None:
    service = _service(tmp_path)
    source = make_wav(duration_sec=3.0, channels=2)

    once = asyncio.run(service.optimize_for_asmr(source))
    twice = asyncio.run(service.optimize_for_asmr(once))

    assert read_wav_info(twice).sample_rate == 44_100
    assert twice != once


def test_wav_conversion_keeps_channels_for_every_tier(tmp_path: Path) -> None:
    service = _service(tmp_path)
    source = make_wav(duration_sec=1.0, sample_rate=48_000, channels=1)

    for tier in QualityTier:
        info = read_wav_info(asyncio.run(service.convert_format(source, OutputFormat.WAV, tier)))
        assert info.channels == 1
        assert info.sample_rate == 44_100
        assert info.sample_width == 2


def test_mp3_premium_conversion_bitrate(tmp_path: Path) -> None:
    if not _has_encoder("libmp3lame"):
        pytest.skip("ffmpeg built without libmp3lame")
    service = _service(tmp_path)

    encoded = asyncio.run(
        service.convert_format(make_wav(duration_sec=2.0, channels=2), OutputFormat.MP3, QualityTier.PREMIUM)
    )
    target = tmp_path / "premium.mp3"
    target.write_bytes(encoded)
    probe = MediaProcessRunner("ffprobe")
    output = asyncio.run(probe.run(["-v", "quiet", "-print_format", "json", "-show_streams", str(target)], "probe"))
    stream = json.loads(output.stdout_text)["streams"][0]

    assert stream["codec_name"] == "mp3"
    assert stream["bit_rate"] == "320000"
