"""Note quantization - Collapse per-frame pitch events into timed notes."""

import logging
import math
from typing import Iterable, List, Optional

from ..config import QuantizeConfig
from ..core import NoteEvent, RawPitchEvent, clamp_midi, hz_to_midi

logger = logging.getLogger(__name__)


class NoteQuantizer:
    """Group raw pitch events into note events on a fixed time window.

    The output feeds both live playback and MIDI export, so it depends only
    on the input events and these settings.
    """

    def __init__(
        self,
        time_window: float = 0.02,
        default_duration: float = 0.2,
        min_duration: float = 0.03125,
        max_duration: float = 0.25,
    ):
        """
        Initialize NoteQuantizer.

        Args:
            time_window: Events within this many seconds of a group's anchor
                (0 for the first group, else its first event) belong to it
            default_duration: Duration of the final note (nothing follows it)
            min_duration: Shortest duration a note may get
            max_duration: Longest duration a note may get
        """
        if time_window <= 0:
            raise ValueError(f"time_window must be positive, got {time_window}")
        if not 0 < min_duration <= max_duration:
            raise ValueError(
                f"Need 0 < min_duration <= max_duration, "
                f"got {min_duration} and {max_duration}"
            )
        if default_duration <= 0:
            raise ValueError(
                f"default_duration must be positive, got {default_duration}"
            )
        self.time_window = time_window
        self.default_duration = default_duration
        self.min_duration = min_duration
        self.max_duration = max_duration

    @classmethod
    def from_config(cls, config: QuantizeConfig) -> "NoteQuantizer":
        return cls(
            time_window=config.time_window,
            default_duration=config.default_duration,
            min_duration=config.min_duration,
            max_duration=config.max_duration,
        )

    def group(self, events: Iterable[RawPitchEvent]) -> List[List[RawPitchEvent]]:
        """
        Split a time-ordered event stream into groups.

        The first group is anchored at time 0, every later group at its first
        event. An event joins the current group while it is less than
        ``time_window`` after that anchor.

        Raises:
            ValueError: If event times go backwards
        """
        groups: List[List[RawPitchEvent]] = []
        current: List[RawPitchEvent] = []
        group_start = 0.0
        last_time: Optional[float] = None

        for event in events:
            if last_time is not None and event.time < last_time:
                raise ValueError(
                    f"Pitch events must be time-ordered: {event.time} after {last_time}"
                )
            last_time = event.time

            if event.time - group_start < self.time_window:
                current.append(event)
            else:
                if current:
                    groups.append(current)
                current = [event]
                group_start = event.time

        if current:
            groups.append(current)

        return groups

    def quantize(self, events: Iterable[RawPitchEvent]) -> List[NoteEvent]:
        """
        Convert raw pitch events to note events.

        Args:
            events: Pitch events in non-decreasing time order

        Returns:
            Note events with strictly increasing start times
        """
        groups = self.group(events)
        notes = []

        for i, group in enumerate(groups):
            start = group[0].time
            if i + 1 < len(groups):
                gap = groups[i + 1][0].time - start
                duration = min(self.max_duration, max(self.min_duration, gap))
            else:
                duration = self.default_duration

            notes.append(
                NoteEvent(
                    time=start,
                    pitches=tuple(sorted({e.frequency for e in group})),
                    midi_notes=tuple(sorted({hz_to_midi(e.frequency) for e in group})),
                    duration=duration,
                    velocity=self._group_velocity(group),
                )
            )

        logger.debug(
            "Quantized %d pitch events into %d notes",
            sum(len(g) for g in groups),
            len(notes),
        )
        return notes

    def _group_velocity(self, group: List[RawPitchEvent]) -> Optional[int]:
        """Velocity from the loudest amplitude in the group, if any."""
        amplitudes = [e.amplitude for e in group if e.amplitude is not None]
        if not amplitudes:
            return None
        return clamp_midi(math.floor(max(amplitudes) * 127 + 0.5))
