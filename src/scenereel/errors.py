"""Error taxonomy for clip assembly.

Each stage raises its own type so callers can tell which step failed:

  ProbeError              a clip is unreadable or has no usable duration
  EmptyAssembly           no clips were supplied
  InvalidTransitionWindow transition duration >= some clip's duration
  CompositingError        one compositing strategy failed (recoverable)
  CompositingFailed       primary AND fallback strategies both failed
  AudioMixFailed          audio overlay step failed
  ToolchainUnavailable    ffmpeg is not present on the host
"""


class ScenereelError(Exception):
    """Base class for all assembly-engine errors."""


class ProbeError(ScenereelError):
    """A clip could not be measured."""

    def __init__(self, path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Cannot probe duration of {self.path}: {reason}")


class EmptyAssembly(ScenereelError, ValueError):
    """Assembly was requested with an empty clip list."""

    def __init__(self, message: str = "No clips to assemble"):
        super().__init__(message)


class InvalidTransitionWindow(ScenereelError, ValueError):
    """The transition would start before the clip it joins has begun."""

    def __init__(self, index: int, clip_duration: float, transition_duration: float):
        self.index = index
        self.clip_duration = clip_duration
        self.transition_duration = transition_duration
        super().__init__(
            f"Clip {index} is {clip_duration:.3f}s long, which does not leave "
            f"room for a {transition_duration:.3f}s transition "
            f"(transition must be shorter than every clip)"
        )


class CompositingError(ScenereelError):
    """A single compositing strategy failed."""


class CompositingFailed(ScenereelError):
    """Both the transition graph and the concat fallback failed."""

    def __init__(self, primary_error: Exception, fallback_error: Exception):
        self.primary_error = primary_error
        self.fallback_error = fallback_error
        super().__init__(
            "Compositing failed with both strategies.\n"
            f"  primary:  {primary_error}\n"
            f"  fallback: {fallback_error}"
        )


class AudioMixFailed(ScenereelError):
    """Overlaying audio beds onto the video failed."""


class ToolchainUnavailable(ScenereelError):
    """The ffmpeg binary could not be found or does not run."""
