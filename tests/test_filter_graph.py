import pytest

from asmr_mastering.mixing.filter_graph import (
    Filter,
    FilterChain,
    build_asmr_optimization_chain,
    build_binaural_graph,
    build_loudness_chain,
    build_mixing_graph,
    format_value,
)
from asmr_mastering.mixing.models import BinauralSettings, EQSettings, MixingOptions


def test_minimal_mixing_graph_only_gains_and_mixes() -> None:
    graph = build_mixing_graph(MixingOptions(voice_volume=0.7, soundscape_volume=0.3))

    assert graph.render() == (
        "[0:a]volume=0.7[voice];"
        "[1:a]volume=0.3[bg];"
        "[voice][bg]amix=inputs=2:duration=shortest:dropout_transition=3[mixed];"
        "[mixed]anull[final]"
    )
    assert graph.map_target == "[final]"


def test_full_mixing_graph_keeps_stage_order() -> None:
    options = MixingOptions(
        voice_volume=0.7,
        soundscape_volume=0.3,
        fade_in_duration=3,
        fade_out_duration=5,
        compression_ratio=2.5,
        eq_settings=EQSettings(low_freq=-2, mid_freq=1, high_freq=-1, low_cutoff=80, high_cutoff=15_000),
    )
    graph = build_mixing_graph(options, total_duration=10.0)

    assert [chain.output for chain in graph.chains] == [
        "voice",
        "bg",
        "mixed",
        "fadein",
        "fadeout",
        "eqed",
        "compressed",
        "final",
    ]
    rendered = {chain.output: chain.render() for chain in graph.chains}
    assert rendered["fadein"] == "[mixed]afade=t=in:ss=0:d=3:curve=exp[fadein]"
    assert rendered["fadeout"] == "[fadein]afade=t=out:st=5:d=5:curve=exp[fadeout]"
    assert rendered["eqed"] == (
        "[fadeout]"
        "equalizer=f=100:width_type=o:width=2:g=-2,"
        "equalizer=f=1000:width_type=o:width=2:g=1,"
        "equalizer=f=10000:width_type=o:width=2:g=-1"
        "[eqed]"
    )
    assert rendered["compressed"] == "[eqed]dynaudnorm=p=0.95:m=10:s=12[compressed]"
    assert rendered["final"] == "[compressed]anull[final]"


def test_fade_out_uses_end_relative_start_without_duration() -> None:
    graph = build_mixing_graph(MixingOptions(fade_out_duration=5))
    assert "[mixed]afade=t=out:st=end-5:d=5:curve=exp[fadeout]" in graph.render()


def test_fade_out_start_never_negative() -> None:
    graph = build_mixing_graph(MixingOptions(fade_out_duration=8), total_duration=6.0)
    assert "afade=t=out:st=0:d=8" in graph.render()


def test_fade_in_skips_when_zero() -> None:
    graph = build_mixing_graph(MixingOptions(fade_in_duration=0, fade_out_duration=2.5), total_duration=10.0)
    rendered = graph.render()
    assert "t=in" not in rendered
    assert "[mixed]afade=t=out:st=7.5:d=2.5:curve=exp[fadeout]" in rendered


def test_compression_ratio_only_gates_fixed_normalizer() -> None:
    unity = build_mixing_graph(MixingOptions(compression_ratio=1.0)).render()
    gentle = build_mixing_graph(MixingOptions(compression_ratio=1.5)).render()
    heavy = build_mixing_graph(MixingOptions(compression_ratio=10.0)).render()

    assert "dynaudnorm" not in unity
    assert gentle == heavy
    assert "dynaudnorm=p=0.95:m=10:s=12" in heavy


def test_eq_cutoffs_are_not_applied_in_mixing_graph() -> None:
    options = MixingOptions(eq_settings=EQSettings(low_cutoff=120, high_cutoff=8000))
    rendered = build_mixing_graph(options).render()
    assert "highpass" not in rendered
    assert "lowpass" not in rendered


def test_binaural_graph_passthrough_for_neutral_settings() -> None:
    graph = build_binaural_graph(BinauralSettings(enabled=True))
    assert graph.render() == "[0:a]anull[stereo];[stereo]anull[delayed];[delayed]anull[binaural]"
    assert graph.map_target == "[binaural]"


def test_binaural_graph_widens_and_delays_per_channel() -> None:
    settings = BinauralSettings(
        enabled=True,
        spatial_width=1.5,
        left_delay=20,
        right_delay=10,
        reverb_amount=0.3,
    )
    assert build_binaural_graph(settings).render() == (
        "[0:a]stereotools=mlev=0.8:slev=1.5[stereo];"
        "[stereo]aecho=0.8:0.9:10|20:0.3|0.3[delayed];"
        "[delayed]anull[binaural]"
    )


def test_binaural_echo_taps_are_always_positive() -> None:
    settings = BinauralSettings(enabled=True, left_delay=15, right_delay=15, reverb_amount=0.05)
    assert "[stereo]aecho=0.8:0.9:15|15:0.05|0.05[delayed]" in build_binaural_graph(settings).render()

    for invalid in (
        {"left_delay": 15},
        {"right_delay": 10, "reverb_amount": 0.3},
        {"left_delay": 10, "right_delay": 10},
    ):
        with pytest.raises(ValueError):
            BinauralSettings(enabled=True, **invalid)
    assert BinauralSettings(enabled=False, left_delay=15).left_delay == 15


def test_asmr_optimization_chain_is_fixed() -> None:
    expected = (
        "highpass=f=80,"
        "lowpass=f=15000,"
        "dynaudnorm=p=0.95:m=10:s=12,"
        "aecho=0.8:0.9:20:0.1,"
        "loudnorm=I=-23:TP=-2:LRA=7"
    )
    assert build_asmr_optimization_chain().render() == expected
    assert build_asmr_optimization_chain() == build_asmr_optimization_chain()


def test_loudness_chain_targets_requested_lufs() -> None:
    assert build_loudness_chain().render() == "loudnorm=I=-23:TP=-2:LRA=7"
    assert build_loudness_chain(-14.5).render() == "loudnorm=I=-14.5:TP=-2:LRA=7"


def test_filter_rendering_primitives() -> None:
    assert Filter("anull").render() == "anull"
    assert Filter("aecho", args=(0.8, (1.0, 2.5))).render() == "aecho=0.8:1|2.5"
    assert FilterChain(filters=(Filter("anull"),), inputs=("a", "b"), output="c").render() == "[a][b]anull[c]"
    assert format_value(3.0) == "3"
    assert format_value(0.25) == "0.25"
    assert format_value("shortest") == "shortest"
