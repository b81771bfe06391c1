"""Vertical profile geometry: grade inference, curve limits, extrema and sampling.

The engine turns a `ProfileDefinition` into fully determined `CurveSegment`
records and a sampled polyline for renderers. Everything here is a pure
function of the definition; callers rerun `recompute_profile` after any edit.

Curve geometry uses the symmetric parabola measured from the BVC::

    elev(x) = BVC_elev + (g_in / 100) * x + (A / 100) / (2 * L) * x ** 2

where ``A = g_out - g_in`` is the algebraic grade change in percent.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Iterator, NamedTuple

from loguru import logger

from .classes_references import ProfileOrderError
from .models.profile import PVI, ProfileDefinition
from .type_helpers import AnnotationKind, PointKind
from .units import percent_to_ratio, ratio_to_percent

if TYPE_CHECKING:
    import pandas as pd

DEFAULT_PLOT_STEP = 5.0
DEFAULT_WINDOW_PAD = 200.0
EMPTY_PROFILE_WINDOW: tuple[float, float] = (0.0, 1000.0)
EMPTY_PROFILE_START_ELEVATION = 100.0
DUPLICATE_TOLERANCE = 0.001


@dataclass(frozen=True, slots=True)
class Extremum:
    """High or low point of a vertical curve."""

    station: float
    elevation: float
    kind: PointKind


@dataclass(frozen=True, slots=True)
class CurveSegment:
    """Resolved geometry for one PVI.

    Attributes:
        index: Position of the PVI in the profile (0-based).
        grade_in: Incoming grade in percent.
        grade_out: Outgoing grade in percent.
        bvc_station/bvc_elevation: Begin of vertical curve.
        evc_station/evc_elevation: End of vertical curve (on the outgoing tangent).
        extremum: High/low point when it falls within the curve.
    """

    index: int
    pvi_station: float
    pvi_elevation: float
    curve_length: float
    grade_in: float
    grade_out: float
    bvc_station: float
    bvc_elevation: float
    evc_station: float
    evc_elevation: float
    extremum: Extremum | None = None

    @property
    def delta_grade(self) -> float:
        return self.grade_out - self.grade_in

    @property
    def has_curve(self) -> bool:
        return self.curve_length > 0

    def elevation_at(self, station: float) -> float:
        """Return the finished-grade elevation near this PVI.

        Stations before the BVC follow the incoming tangent and stations after the
        EVC follow the outgoing tangent.
        """
        if station <= self.bvc_station:
            return _tangent_elevation(self.bvc_station, self.bvc_elevation, self.grade_in, station)
        if station >= self.evc_station or not self.has_curve:
            return _tangent_elevation(self.pvi_station, self.pvi_elevation, self.grade_out, station)
        return _parabola_elevation(self, station - self.bvc_station)


class ProfilePoint(NamedTuple):
    station: float
    elevation: float


@dataclass(frozen=True, slots=True)
class ProfilePolyline:
    """Ordered, finite and re-iterable sequence of sampled profile points."""

    points: tuple[ProfilePoint, ...]

    def __iter__(self) -> Iterator[ProfilePoint]:
        return iter(self.points)

    def __len__(self) -> int:
        return len(self.points)

    def __getitem__(self, index: int) -> ProfilePoint:
        return self.points[index]

    def stations(self) -> list[float]:
        return [point.station for point in self.points]

    def elevations(self) -> list[float]:
        return [point.elevation for point in self.points]

    def to_dataframe(self) -> "pd.DataFrame":
        """Return the polyline as a pandas DataFrame with station/elevation columns."""
        import pandas as pd

        return pd.DataFrame(self.points, columns=["station", "elevation"])


@dataclass(frozen=True, slots=True)
class ProfileAnnotation:
    """Labelled point (PVI, BVC, EVC, high or low point) for a renderer."""

    kind: AnnotationKind
    index: int
    station: float
    elevation: float

    @property
    def label(self) -> str:
        return f"{self.kind.value} Sta: {self.station:.0f}, Elev: {self.elevation:.2f}"


@dataclass(frozen=True, slots=True)
class GradeLabel:
    """Grade text positioned at the middle of a tangent."""

    station: float
    elevation: float
    grade: float

    @property
    def text(self) -> str:
        return f"{self.grade:.2f}%"


@dataclass(frozen=True, slots=True)
class ProfileDerived:
    """Everything derived from a `ProfileDefinition` in one evaluation."""

    segments: tuple[CurveSegment, ...]
    polyline: ProfilePolyline
    annotations: tuple[ProfileAnnotation, ...]
    grade_labels: tuple[GradeLabel, ...]
    window: tuple[float, float]

    def extrema(self, kind: PointKind | None = None) -> list[Extremum]:
        return [
            segment.extremum
            for segment in self.segments
            if segment.extremum is not None and (kind is None or segment.extremum.kind is kind)
        ]


def _tangent_elevation(start_station: float, start_elevation: float, grade: float, station: float) -> float:
    return start_elevation + percent_to_ratio(grade) * (station - start_station)


def _parabola_elevation(segment: CurveSegment, offset: float) -> float:
    rate: float = percent_to_ratio(segment.delta_grade) / (2 * segment.curve_length)
    return segment.bvc_elevation + percent_to_ratio(segment.grade_in) * offset + rate * offset * offset


def _grade_between(first: PVI, second: PVI) -> float:
    if second.station == first.station:
        logger.warning(
            "PVIs share station {station:.3f}; treating the grade between them as 0%", station=first.station
        )
        return 0.0
    return ratio_to_percent((second.elevation - first.elevation) / (second.station - first.station))


def _defined(grade: float | None) -> float:
    return 0.0 if grade is None else grade


def _find_extremum(segment: CurveSegment) -> Extremum | None:
    delta: float = segment.delta_grade
    if not segment.has_curve or delta == 0:
        return None
    offset: float = (-segment.grade_in / delta) * segment.curve_length
    if not 0 <= offset <= segment.curve_length:
        return None
    return Extremum(
        station=segment.bvc_station + offset,
        elevation=_parabola_elevation(segment, offset),
        kind=PointKind.LOW if delta > 0 else PointKind.HIGH,
    )


def resolve_segment(profile: ProfileDefinition, index: int) -> CurveSegment:
    """Resolve grades, curve limits and the extremum of the PVI at ``index``."""

    pvis: list[PVI] = profile.pvis
    pvi: PVI = pvis[index]
    grade_in: float = _defined(profile.beginning_grade) if index == 0 else _grade_between(pvis[index - 1], pvi)
    grade_out: float = (
        _defined(profile.ending_grade) if index == len(pvis) - 1 else _grade_between(pvi, pvis[index + 1])
    )
    length: float = pvi.curve_length if pvi.curve_length > 0 else 0.0
    half: float = length / 2
    segment = CurveSegment(
        index=index,
        pvi_station=pvi.station,
        pvi_elevation=pvi.elevation,
        curve_length=length,
        grade_in=grade_in,
        grade_out=grade_out,
        bvc_station=pvi.station - half,
        bvc_elevation=pvi.elevation - percent_to_ratio(grade_in) * half,
        evc_station=pvi.station + half,
        evc_elevation=pvi.elevation + percent_to_ratio(grade_out) * half,
    )
    extremum: Extremum | None = _find_extremum(segment)
    if extremum is None:
        return segment
    return replace(segment, extremum=extremum)


def resolve_segments(profile: ProfileDefinition) -> tuple[CurveSegment, ...]:
    """Resolve every PVI in sequence order."""

    segments = tuple(resolve_segment(profile, index) for index in range(len(profile.pvis)))
    logger.debug("Resolved {count} curve segments for {profile}", count=len(segments), profile=profile.describe())
    return segments


def check_station_order(profile: ProfileDefinition) -> None:
    """Raise `ProfileOrderError` when a PVI station precedes the previous one."""

    for index in range(1, len(profile.pvis)):
        previous: float = profile.pvis[index - 1].station
        current: float = profile.pvis[index].station
        if current < previous:
            raise ProfileOrderError(index=index, station=current, previous_station=previous)


def profile_window(segments: tuple[CurveSegment, ...], pad: float = DEFAULT_WINDOW_PAD) -> tuple[float, float]:
    """Return the station range a sampled profile covers (never starting before 0)."""

    if not segments:
        return EMPTY_PROFILE_WINDOW
    start: float = min(segment.bvc_station for segment in segments) - pad
    end: float = max(segment.evc_station for segment in segments) + pad
    return max(start, 0.0), end


def _tangent_run(
    start: ProfilePoint, grade: float, end_station: float, step: float, *, include_end: bool
) -> list[ProfilePoint]:
    """Points every ``step`` after ``start`` up to ``end_station``."""

    points: list[ProfilePoint] = []
    count: int = 1
    station: float = start.station + step
    while station < end_station:
        points.append(ProfilePoint(station, _tangent_elevation(start.station, start.elevation, grade, station)))
        count += 1
        station = start.station + count * step
    if include_end:
        points.append(ProfilePoint(end_station, _tangent_elevation(start.station, start.elevation, grade, end_station)))
    return points


def _curve_run(segment: CurveSegment, step: float) -> list[ProfilePoint]:
    points: list[ProfilePoint] = []
    count: int = 0
    station: float = segment.bvc_station
    while station < segment.evc_station:
        points.append(ProfilePoint(station, segment.elevation_at(station)))
        count += 1
        station = segment.bvc_station + count * step
    points.append(ProfilePoint(segment.pvi_station, segment.elevation_at(segment.pvi_station)))
    points.append(ProfilePoint(segment.evc_station, segment.evc_elevation))
    return points


def _clean(points: list[ProfilePoint]) -> tuple[ProfilePoint, ...]:
    """Sort by station, drop non-finite elevations and collapse near-duplicates."""

    ordered: list[ProfilePoint] = sorted(
        (point for point in points if math.isfinite(point.elevation)), key=lambda point: point.station
    )
    unique: list[ProfilePoint] = []
    for point in ordered:
        if unique:
            previous: ProfilePoint = unique[-1]
            if point.station == previous.station and abs(point.elevation - previous.elevation) < DUPLICATE_TOLERANCE:
                continue
        unique.append(point)
    return tuple(unique)


def sample_profile(
    profile: ProfileDefinition,
    segments: tuple[CurveSegment, ...] | None = None,
    *,
    step: float = DEFAULT_PLOT_STEP,
    pad: float = DEFAULT_WINDOW_PAD,
) -> ProfilePolyline:
    """
    Sample the finished grade from the left pad to the right pad.

    Tangents and curves are sampled every ``step`` feet from the start of each
    run; the BVC, PVI and EVC of every PVI are inserted as exact breakpoints.

    Raises:
        ProfileOrderError: PVI stations decrease along the profile.
    """
    if step <= 0:
        raise ValueError("Sampling step must be > 0.")
    check_station_order(profile)
    if segments is None:
        segments = resolve_segments(profile)
    window_start, window_end = profile_window(segments, pad)
    points: list[ProfilePoint] = []

    if not segments:
        grade: float = _defined(profile.ending_grade if profile.ending_grade is not None else profile.beginning_grade)
        start_elevation: float = EMPTY_PROFILE_START_ELEVATION if profile.beginning_grade is not None else 0.0
        origin = ProfilePoint(window_start, start_elevation)
        points.append(origin)
        points.extend(_tangent_run(origin, grade, window_end, step, include_end=True))
        return ProfilePolyline(_clean(points))

    # The window can clip the first curve, so start on the curve rather than its tangent.
    last = ProfilePoint(window_start, segments[0].elevation_at(window_start))
    points.append(last)
    previous_evc: float | None = None
    for segment in segments:
        if previous_evc is not None and segment.bvc_station < previous_evc:
            logger.warning(
                "Vertical curve at PVI #{index} starts at {bvc:.3f} before the previous curve ends at {evc:.3f}",
                index=segment.index + 1,
                bvc=segment.bvc_station,
                evc=previous_evc,
            )
        if segment.bvc_station > last.station:
            rise: float = segment.bvc_elevation - last.elevation
            run_grade: float = ratio_to_percent(rise / (segment.bvc_station - last.station))
            points.extend(_tangent_run(last, run_grade, segment.bvc_station, step, include_end=False))
            points.append(ProfilePoint(segment.bvc_station, segment.bvc_elevation))
        if segment.has_curve:
            points.extend(_curve_run(segment, step))
            last = ProfilePoint(segment.evc_station, segment.evc_elevation)
        else:
            last = ProfilePoint(segment.pvi_station, segment.pvi_elevation)
            points.append(last)
        previous_evc = segment.evc_station

    if last.station < window_end:
        points.extend(_tangent_run(last, _defined(profile.ending_grade), window_end, step, include_end=True))
    polyline = ProfilePolyline(_clean([point for point in points if point.station >= window_start]))
    logger.debug(
        "Sampled {count} profile points between stations {start:.3f} and {end:.3f}",
        count=len(polyline),
        start=window_start,
        end=window_end,
    )
    return polyline


def annotate(segments: tuple[CurveSegment, ...]) -> list[ProfileAnnotation]:
    """Return PVI markers plus BVC, EVC and extremum markers for curved PVIs."""

    annotations: list[ProfileAnnotation] = []
    for segment in segments:
        annotations.append(
            ProfileAnnotation(AnnotationKind.PVI, segment.index, segment.pvi_station, segment.pvi_elevation)
        )
        if not segment.has_curve:
            continue
        annotations.append(
            ProfileAnnotation(AnnotationKind.BVC, segment.index, segment.bvc_station, segment.bvc_elevation)
        )
        annotations.append(
            ProfileAnnotation(AnnotationKind.EVC, segment.index, segment.evc_station, segment.evc_elevation)
        )
        if segment.extremum is not None:
            annotations.append(
                ProfileAnnotation(
                    AnnotationKind(segment.extremum.kind.value),
                    segment.index,
                    segment.extremum.station,
                    segment.extremum.elevation,
                )
            )
    return [annotation for annotation in annotations if math.isfinite(annotation.elevation)]


def grade_labels(
    profile: ProfileDefinition, segments: tuple[CurveSegment, ...], window: tuple[float, float]
) -> list[GradeLabel]:
    """Place a grade label at the middle of each visible tangent."""

    window_start, window_end = window
    labels: list[GradeLabel] = []
    if not segments:
        grade: float | None = profile.ending_grade if profile.ending_grade is not None else profile.beginning_grade
        if grade is None:
            return labels
        start_elevation: float = EMPTY_PROFILE_START_ELEVATION if profile.beginning_grade is not None else 0.0
        middle: float = (window_start + window_end) / 2
        labels.append(GradeLabel(middle, _tangent_elevation(window_start, start_elevation, grade, middle), grade))
        return labels

    first: CurveSegment = segments[0]
    if profile.beginning_grade is not None and first.bvc_station > window_start:
        middle = (window_start + first.bvc_station) / 2
        elevation: float = _tangent_elevation(first.bvc_station, first.bvc_elevation, profile.beginning_grade, middle)
        labels.append(GradeLabel(middle, elevation, profile.beginning_grade))
    for current, following in zip(segments, segments[1:]):
        if following.bvc_station > current.evc_station:
            middle = (current.evc_station + following.bvc_station) / 2
            elevation = _tangent_elevation(current.pvi_station, current.pvi_elevation, current.grade_out, middle)
            labels.append(GradeLabel(middle, elevation, current.grade_out))
    final: CurveSegment = segments[-1]
    if profile.ending_grade is not None and window_end > final.evc_station:
        middle = (final.evc_station + window_end) / 2
        elevation = _tangent_elevation(final.evc_station, final.evc_elevation, profile.ending_grade, middle)
        labels.append(GradeLabel(middle, elevation, profile.ending_grade))
    return [label for label in labels if math.isfinite(label.elevation)]


def recompute_profile(
    profile: ProfileDefinition, *, step: float = DEFAULT_PLOT_STEP, pad: float = DEFAULT_WINDOW_PAD
) -> ProfileDerived:
    """Resolve, sample and annotate ``profile`` in one pass."""

    segments: tuple[CurveSegment, ...] = resolve_segments(profile)
    window: tuple[float, float] = profile_window(segments, pad)
    polyline: ProfilePolyline = sample_profile(profile, segments, step=step, pad=pad)
    derived = ProfileDerived(
        segments=segments,
        polyline=polyline,
        annotations=tuple(annotate(segments)),
        grade_labels=tuple(grade_labels(profile, segments, window)),
        window=window,
    )
    logger.info(
        "Profile recomputed: {segments} PVIs, {points} sampled points, {extrema} high/low points",
        segments=len(segments),
        points=len(polyline),
        extrema=len(derived.extrema()),
    )
    return derived


__all__: list[str] = [
    "CurveSegment",
    "Extremum",
    "GradeLabel",
    "ProfileAnnotation",
    "ProfileDerived",
    "ProfilePoint",
    "ProfilePolyline",
    "annotate",
    "check_station_order",
    "grade_labels",
    "profile_window",
    "recompute_profile",
    "resolve_segment",
    "resolve_segments",
    "sample_profile",
]
