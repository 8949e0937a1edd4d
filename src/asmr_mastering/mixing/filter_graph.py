"""Filter-graph construction for mixing, binaural and mastering stages.

Graphs are built as small node lists and only serialized to ffmpeg's
textual ``-filter_complex`` / ``-af`` syntax at the edge, so each stage can be
asserted on structurally.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from asmr_mastering.mixing.models import BinauralSettings, EQSettings, MixingOptions

FilterValue = Union[str, int, float, tuple[Union[str, int, float], ...]]

EQ_BAND_CENTERS_HZ: tuple[float, float, float] = (100.0, 1000.0, 10000.0)
EQ_BAND_WIDTH_OCTAVES = 2
AMIX_DROPOUT_TRANSITION_SEC = 3
STEREO_MID_LEVEL = 0.8
ECHO_IN_GAIN = 0.8
ECHO_OUT_GAIN = 0.9
LOUDNESS_TRUE_PEAK_DB = -2
LOUDNESS_RANGE_LU = 7
DEFAULT_TARGET_LUFS = -23


@dataclass(frozen=True, slots=True)
class Filter:
    name: str
    args: tuple[FilterValue, ...] = ()
    options: tuple[tuple[str, FilterValue], ...] = ()

    def render(self) -> str:
        parts = [format_value(arg) for arg in self.args]
        parts.extend(f"{key}={format_value(value)}" for key, value in self.options)
        if not parts:
            return self.name
        return f"{self.name}={':'.join(parts)}"


@dataclass(frozen=True, slots=True)
class FilterChain:
    filters: tuple[Filter, ...]
    inputs: tuple[str, ...] = ()
    output: str | None = None

    def render(self) -> str:
        head = "".join(f"[{label}]" for label in self.inputs)
        tail = f"[{self.output}]" if self.output else ""
        return head + ",".join(item.render() for item in self.filters) + tail


@dataclass(slots=True)
class FilterGraph:
    chains: list[FilterChain] = field(default_factory=list)

    def add(self, inputs: tuple[str, ...], output: str, *filters: Filter) -> str:
        self.chains.append(FilterChain(filters=filters, inputs=inputs, output=output))
        return output

    @property
    def output_label(self) -> str:
        if not self.chains or self.chains[-1].output is None:
            raise ValueError("filter graph has no terminal output")
        return self.chains[-1].output

    @property
    def map_target(self) -> str:
        return f"[{self.output_label}]"

    def render(self) -> str:
        return ";".join(chain.render() for chain in self.chains)


def format_value(value: FilterValue) -> str:
    if isinstance(value, tuple):
        return "|".join(format_value(item) for item in value)
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def dynamic_normalizer() -> Filter:
    return Filter("dynaudnorm", options=(("p", 0.95), ("m", 10), ("s", 12)))


def loudness_normalizer(target_lufs: float = DEFAULT_TARGET_LUFS) -> Filter:
    return Filter(
        "loudnorm",
        options=(("I", target_lufs), ("TP", LOUDNESS_TRUE_PEAK_DB), ("LRA", LOUDNESS_RANGE_LU)),
    )


def equalizer_stages(eq: EQSettings) -> tuple[Filter, ...]:
    gains = (eq.low_freq, eq.mid_freq, eq.high_freq)
    return tuple(
        Filter(
            "equalizer",
            options=(("f", center), ("width_type", "o"), ("width", EQ_BAND_WIDTH_OCTAVES), ("g", gain)),
        )
        for center, gain in zip(EQ_BAND_CENTERS_HZ, gains, strict=True)
    )


def build_mixing_graph(options: MixingOptions, total_duration: float | None = None) -> FilterGraph:
    graph = FilterGraph()
    voice = graph.add(("0:a",), "voice", Filter("volume", args=(options.voice_volume,)))
    background = graph.add(("1:a",), "bg", Filter("volume", args=(options.soundscape_volume,)))
    current = graph.add(
        (voice, background),
        "mixed",
        Filter(
            "amix",
            options=(
                ("inputs", 2),
                ("duration", "shortest"),
                ("dropout_transition", AMIX_DROPOUT_TRANSITION_SEC),
            ),
        ),
    )

    if options.fade_in_duration > 0:
        current = graph.add(
            (current,),
            "fadein",
            Filter(
                "afade",
                options=(("t", "in"), ("ss", 0), ("d", options.fade_in_duration), ("curve", "exp")),
            ),
        )

    if options.fade_out_duration > 0:
        current = graph.add(
            (current,),
            "fadeout",
            Filter(
                "afade",
                options=(
                    ("t", "out"),
                    ("st", _fade_out_start(options.fade_out_duration, total_duration)),
                    ("d", options.fade_out_duration),
                    ("curve", "exp"),
                ),
            ),
        )

    if options.eq_settings is not None:
        current = graph.add((current,), "eqed", *equalizer_stages(options.eq_settings))

    # The ratio only gates the stage; the normalizer settings are fixed.
    if options.compression_ratio is not None and options.compression_ratio > 1:
        current = graph.add((current,), "compressed", dynamic_normalizer())

    graph.add((current,), "final", Filter("anull"))
    return graph


def build_binaural_graph(settings: BinauralSettings) -> FilterGraph:
    graph = FilterGraph()
    if settings.spatial_width == 1.0:
        stereo = graph.add(("0:a",), "stereo", Filter("anull"))
    else:
        stereo = graph.add(
            ("0:a",),
            "stereo",
            Filter("stereotools", options=(("mlev", STEREO_MID_LEVEL), ("slev", settings.spatial_width))),
        )

    if settings.left_delay > 0 or settings.right_delay > 0:
        delayed = graph.add(
            (stereo,),
            "delayed",
            Filter(
                "aecho",
                args=(
                    ECHO_IN_GAIN,
                    ECHO_OUT_GAIN,
                    (settings.right_delay, settings.left_delay),
                    (settings.reverb_amount, settings.reverb_amount),
                ),
            ),
        )
    else:
        delayed = graph.add((stereo,), "delayed", Filter("anull"))

    graph.add((delayed,), "binaural", Filter("anull"))
    return graph


def build_asmr_optimization_chain() -> FilterChain:
    return FilterChain(
        filters=(
            Filter("highpass", options=(("f", 80),)),
            Filter("lowpass", options=(("f", 15000),)),
            dynamic_normalizer(),
            Filter("aecho", args=(ECHO_IN_GAIN, ECHO_OUT_GAIN, 20, 0.1)),
            loudness_normalizer(DEFAULT_TARGET_LUFS),
        )
    )


def build_loudness_chain(target_lufs: float = DEFAULT_TARGET_LUFS) -> FilterChain:
    return FilterChain(filters=(loudness_normalizer(target_lufs),))


def _fade_out_start(fade_out: float, total_duration: float | None) -> FilterValue:
    if total_duration is None:
        return f"end-{format_value(fade_out)}"
    return max(total_duration - fade_out, 0.0)
