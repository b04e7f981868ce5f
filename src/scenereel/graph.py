"""Transition graph builder - chained xfade filter graphs as plain values.

The graph is built from probed clip durations first and serialized to
ffmpeg's -filter_complex syntax only when it is executed, so offset math
can be tested without ffmpeg.

For N clips with durations d_0..d_{N-1} and transition duration t, the
chain is strictly left-to-right:

    [0:v][1:v]      -> [v0]   offset_0 = d_0 - t
    [v0][2:v]       -> [v1]   offset_1 = offset_0 + d_1 - t
    ...
    [v{N-3}][{N-1}:v] -> [v{N-2}]

After each crossfade the running composite is the sum of raw durations
minus the overlaps already consumed, so the next transition starts t
seconds before that running end. Only two adjacent clips ever overlap;
three-way overlapping transitions are not supported.
"""

from dataclasses import dataclass

from .errors import EmptyAssembly, InvalidTransitionWindow


# Transition kinds map 1:1 to ffmpeg xfade transition names.
VALID_TRANSITIONS = {
    "fade", "wipeleft", "wiperight", "slideup", "slidedown",
    "dissolve", "circleopen",
}


def normalize_transition(kind: str) -> str:
    """Accept 'wipe-left' / 'wipe_left' spellings; reject unknown kinds."""
    name = str(kind).strip().lower().replace("-", "").replace("_", "")
    if name not in VALID_TRANSITIONS:
        raise ValueError(
            f"Invalid transition '{kind}'. Valid: {sorted(VALID_TRANSITIONS)}"
        )
    return name


@dataclass(frozen=True)
class TimelineSegment:
    """One join point on the growing composite."""
    index: int
    offset: float
    label: str


@dataclass(frozen=True)
class XfadeJoin:
    """Cross-fade of two labelled streams into a new label."""
    left: str
    right: str
    transition: str
    duration: float
    offset: float
    output: str

    def to_filter(self) -> str:
        return (
            f"{self.left}{self.right}xfade=transition={self.transition}"
            f":duration={self.duration:.3f}:offset={self.offset:.3f}{self.output}"
        )


@dataclass(frozen=True)
class FilterGraph:
    joins: tuple[XfadeJoin, ...]
    output_label: str

    def to_filter_complex(self) -> str:
        return ";".join(join.to_filter() for join in self.joins)

    @property
    def offsets(self) -> list[float]:
        return [join.offset for join in self.joins]


def _input_label(index: int) -> str:
    return f"[{index}:v]"


def _join_label(index: int) -> str:
    return f"[v{index}]"


def validate_transition_window(durations: list[float], transition_duration: float) -> None:
    """Raise InvalidTransitionWindow if any clip is not longer than the transition."""
    if transition_duration <= 0:
        raise ValueError(
            f"Transition duration must be > 0, got {transition_duration!r}"
        )
    for i, d in enumerate(durations):
        if d <= transition_duration:
            raise InvalidTransitionWindow(i, d, transition_duration)


def compute_offsets(
    durations: list[float], transition_duration: float,
) -> list[TimelineSegment]:
    """Compute the start offset of every transition in the chain.

    Returns N-1 segments for N clips (an empty list for a single clip).

    Raises:
        EmptyAssembly: No durations given.
        InvalidTransitionWindow: Some d_i <= transition_duration.
    """
    if not durations:
        raise EmptyAssembly()
    validate_transition_window(durations, transition_duration)

    segments = []
    offset = 0.0
    for i in range(len(durations) - 1):
        offset = offset + durations[i] - transition_duration
        segments.append(TimelineSegment(index=i, offset=offset, label=_join_label(i)))
    return segments


def expected_duration(durations: list[float], transition_duration: float) -> float:
    """Length of the composite: sum of clips minus one overlap per join."""
    if len(durations) < 2:
        return sum(durations)
    return sum(durations) - (len(durations) - 1) * transition_duration


def build_transition_graph(
    durations: list[float],
    transition: str,
    transition_duration: float,
) -> FilterGraph | None:
    """Build the xfade chain for clips with the given durations.

    Returns None for a single clip (identity copy, no graph needed).

    Raises:
        EmptyAssembly: No durations given.
        InvalidTransitionWindow: Some clip is too short for the transition.
        ValueError: Unknown transition kind.
    """
    kind = normalize_transition(transition)
    segments = compute_offsets(durations, transition_duration)
    if not segments:
        return None

    joins = []
    for seg in segments:
        left = _input_label(0) if seg.index == 0 else _join_label(seg.index - 1)
        right = _input_label(seg.index + 1)
        joins.append(XfadeJoin(
            left=left,
            right=right,
            transition=kind,
            duration=transition_duration,
            offset=seg.offset,
            output=seg.label,
        ))

    return FilterGraph(joins=tuple(joins), output_label=segments[-1].label)
