"""Interaction workflow for MapMeasure.

The workflow is a finite state machine driven by one input at a time:
a click on the image or a named command. Each input is handled
atomically and answered with a :class:`Transition` describing the new
state, whether the input was accepted and what it changed. Rejections
are ordinary results carrying a message, so a presentation layer can
show them and let the user try again from the same state.

    UPLOAD_IMAGE -> CALIBRATE_START -> CALIBRATE_END -> SET_ORIGIN -> READY
    READY <-> NAMING_POINT
    READY <-> DEFINING_AREA <-> NAMING_AREA
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from loguru import logger

from mapmeasure.config.defaults import default_value
from mapmeasure.config.manager import ConfigManager
from mapmeasure.core.calibration import CalibrationModel
from mapmeasure.core.errors import (
    DegenerateCalibrationError,
    InvalidNameError,
    InvalidStateError,
)
from mapmeasure.core.geometry import PixelCoords, RealCoords, distance_and_bearing, rotation_from_drag
from mapmeasure.core.session import MIN_AREA_VERTICES, Point, Session


class AppState(Enum):
    """Workflow states, in the order a new session walks through them."""

    UPLOAD_IMAGE = "upload_image"
    CALIBRATE_START = "calibrate_start"
    CALIBRATE_END = "calibrate_end"
    SET_ORIGIN = "set_origin"
    READY = "ready"
    NAMING_POINT = "naming_point"
    DEFINING_AREA = "defining_area"
    NAMING_AREA = "naming_area"


# States in which the map is calibrated and has an origin
MEASURING_STATES = frozenset(
    {AppState.READY, AppState.NAMING_POINT, AppState.DEFINING_AREA, AppState.NAMING_AREA}
)

# States in which the known calibration distance may still change
DISTANCE_EDITABLE_STATES = frozenset(
    {AppState.UPLOAD_IMAGE, AppState.CALIBRATE_START, AppState.CALIBRATE_END}
)


class Effect(Enum):
    """What an accepted (or rejected) input did to the session."""

    IMAGE_LOADED = "image_loaded"
    CALIBRATION_POINT_STORED = "calibration_point_stored"
    SCALE_DEFINED = "scale_defined"
    CALIBRATION_DISCARDED = "calibration_discarded"
    ORIGIN_SET = "origin_set"
    ORIGIN_CLEARED = "origin_cleared"
    POINT_STAGED = "point_staged"
    POINT_ADDED = "point_added"
    POINT_DISCARDED = "point_discarded"
    AREA_STARTED = "area_started"
    VERTEX_ADDED = "vertex_added"
    AREA_STAGED = "area_staged"
    AREA_ADDED = "area_added"
    AREA_DISCARDED = "area_discarded"
    AREA_NAMING_CANCELLED = "area_naming_cancelled"
    RESET = "reset"


# --- Inputs ---


@dataclass(frozen=True)
class LoadImage:
    image_id: str


@dataclass(frozen=True)
class Click:
    """A click on the image; ``position`` is None when it missed the surface."""

    position: PixelCoords | None


@dataclass(frozen=True)
class StartArea:
    pass


@dataclass(frozen=True)
class FinishArea:
    pass


@dataclass(frozen=True)
class Confirm:
    name: str


@dataclass(frozen=True)
class Cancel:
    pass


@dataclass(frozen=True)
class MoveOrigin:
    pass


@dataclass(frozen=True)
class Reset:
    pass


Event = LoadImage | Click | StartArea | FinishArea | Confirm | Cancel | MoveOrigin | Reset


@dataclass(frozen=True)
class Transition:
    """Outcome of handling one input."""

    previous: AppState
    state: AppState
    accepted: bool
    effect: Effect | None = None
    message: str = ""


@dataclass(frozen=True)
class Preview:
    """Live readout for the pointer position; never stored."""

    real_coords: RealCoords
    distance: float
    bearing: float


@dataclass(frozen=True)
class Instruction:
    title: str
    description: str


def _resolved(position: PixelCoords | None) -> bool:
    return position is not None and math.isfinite(position.x) and math.isfinite(position.y)


class InteractionMachine:
    """Sequences calibration, origin placement and point/area capture."""

    def __init__(self, session: Session | None = None, config: ConfigManager | None = None):
        self._config = config if config is not None else ConfigManager.from_defaults()
        if session is None:
            session = Session(calibration=CalibrationModel(self._default_known_distance()))
        self._session = session
        self._state = AppState.UPLOAD_IMAGE
        self._pending_point: PixelCoords | None = None
        self._pending_name = ""
        self._area_vertices: list[Point] = []

        self._handlers: dict[tuple[AppState, type], Callable[..., Transition]] = {
            (AppState.UPLOAD_IMAGE, LoadImage): self._load_image,
            (AppState.CALIBRATE_START, Click): self._first_calibration_click,
            (AppState.CALIBRATE_END, Click): self._second_calibration_click,
            (AppState.SET_ORIGIN, Click): self._origin_click,
            (AppState.READY, Click): self._stage_point,
            (AppState.READY, StartArea): self._start_area,
            (AppState.READY, MoveOrigin): self._move_origin,
            (AppState.NAMING_POINT, Confirm): self._confirm_point,
            (AppState.NAMING_POINT, Cancel): self._cancel_point,
            (AppState.DEFINING_AREA, Click): self._add_vertex,
            (AppState.DEFINING_AREA, FinishArea): self._finish_area,
            (AppState.DEFINING_AREA, Cancel): self._cancel_area,
            (AppState.NAMING_AREA, Confirm): self._confirm_area,
            (AppState.NAMING_AREA, Cancel): self._cancel_area_naming,
        }

    # --- Read-only views ---

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def session(self) -> Session:
        return self._session

    @property
    def known_distance(self) -> float:
        return self._session.calibration.known_distance

    @property
    def pending_point(self) -> PixelCoords | None:
        return self._pending_point

    @property
    def pending_name(self) -> str:
        """Default name offered while naming a point or an area."""
        return self._pending_name

    @property
    def area_vertices(self) -> tuple[Point, ...]:
        return tuple(self._area_vertices)

    # --- Dispatch ---

    def handle(self, event: Event) -> Transition:
        """Apply one input and report what happened."""
        if isinstance(event, Reset):
            return self._reset(event)

        handler = self._handlers.get((self._state, type(event)))
        if handler is None:
            return self._reject(f"{type(event).__name__} is not available in {self._state.name}")
        if isinstance(event, Click) and not _resolved(event.position):
            return self._reject("Click position could not be resolved")
        return handler(event)

    def load_image(self, image_id: str) -> Transition:
        return self.handle(LoadImage(image_id))

    def click(self, position: PixelCoords | None) -> Transition:
        return self.handle(Click(position))

    def start_area(self) -> Transition:
        return self.handle(StartArea())

    def finish_area(self) -> Transition:
        return self.handle(FinishArea())

    def confirm(self, name: str) -> Transition:
        return self.handle(Confirm(name))

    def cancel(self) -> Transition:
        return self.handle(Cancel())

    def move_origin(self) -> Transition:
        return self.handle(MoveOrigin())

    def reset(self) -> Transition:
        return self.handle(Reset())

    # --- Continuous inputs ---

    def set_known_distance(self, distance: float):
        """Change the real length of the calibration segment."""
        if self._state not in DISTANCE_EDITABLE_STATES:
            raise InvalidStateError(
                f"Known distance is fixed once calibration completes (state {self._state.name})"
            )
        self._session.calibration.set_known_distance(distance)

    def set_reference_direction(self, degrees: float) -> float:
        """Rotate north; every stored point's bearing follows."""
        if self._state not in MEASURING_STATES:
            raise InvalidStateError(f"North cannot be rotated in {self._state.name}")
        return self._session.set_reference_direction(degrees)

    def rotate_from_drag(self, center: PixelCoords, pointer: PixelCoords) -> float:
        """Rotate north from a compass drag gesture."""
        return self.set_reference_direction(rotation_from_drag(center, pointer))

    def preview(self, position: PixelCoords | None) -> Preview | None:
        """Real-world readout for the pointer, or None if the map is not measurable."""
        if not _resolved(position) or self._state not in MEASURING_STATES:
            return None
        real = self._session.calibration.to_real(position)
        polar = distance_and_bearing(real, self._session.reference_direction)
        return Preview(real_coords=real, distance=polar.distance, bearing=polar.bearing)

    def instruction(self) -> Instruction:
        """Title and help text for the current state."""
        unit = self._setting("calibration", "unit_label")
        texts = {
            AppState.UPLOAD_IMAGE: (
                "Load File",
                "Select a map, floor plan or satellite image to begin.",
            ),
            AppState.CALIBRATE_START: (
                "Step 1: Calibrate Scale",
                "Click the START point of a known distance.",
            ),
            AppState.CALIBRATE_END: (
                "Step 1: Calibrate Scale",
                f"Click the END point of the {self.known_distance:g}{unit} distance.",
            ),
            AppState.SET_ORIGIN: (
                "Step 2: Set Origin",
                "Click on the map to place the origin (0, 0).",
            ),
            AppState.READY: (
                "Step 3: Map and Orient",
                "Click to mark a point, create an area, or turn the compass to set north.",
            ),
            AppState.NAMING_POINT: ("Save Point", "Enter a name for the new point and save it."),
            AppState.DEFINING_AREA: (
                "Create Area",
                f"Click to add vertices. At least {MIN_AREA_VERTICES} are needed to save.",
            ),
            AppState.NAMING_AREA: ("Save Area", "Enter a name for the new area and save it."),
        }
        title, description = texts[self._state]
        return Instruction(title=title, description=description)

    # --- Transition handlers ---

    def _load_image(self, event: LoadImage) -> Transition:
        self._session.image_id = event.image_id
        self._session.calibration.begin_calibration(self.known_distance)
        logger.info(f"Image loaded: {event.image_id}")
        return self._move(AppState.CALIBRATE_START, Effect.IMAGE_LOADED)

    def _first_calibration_click(self, event: Click) -> Transition:
        self._session.calibration.capture_calibration_point(event.position)
        return self._move(AppState.CALIBRATE_END, Effect.CALIBRATION_POINT_STORED)

    def _second_calibration_click(self, event: Click) -> Transition:
        calibration = self._session.calibration
        try:
            calibration.capture_calibration_point(event.position)
        except DegenerateCalibrationError as e:
            logger.warning(f"Calibration rejected: {e}")
            calibration.discard_calibration_points()
            return self._move(
                AppState.CALIBRATE_START,
                Effect.CALIBRATION_DISCARDED,
                accepted=False,
                message="The two calibration points must be different. Start again.",
            )
        return self._move(AppState.SET_ORIGIN, Effect.SCALE_DEFINED)

    def _origin_click(self, event: Click) -> Transition:
        self._session.calibration.set_origin(event.position)
        return self._move(AppState.READY, Effect.ORIGIN_SET)

    def _move_origin(self, event: MoveOrigin) -> Transition:
        if self._session.calibration.origin_locked:
            return self._reject("The origin cannot move once points or areas are recorded")
        self._session.calibration.clear_origin()
        return self._move(AppState.SET_ORIGIN, Effect.ORIGIN_CLEARED)

    def _stage_point(self, event: Click) -> Transition:
        self._pending_point = event.position
        self._pending_name = self._next_name(
            "point_name_template", len(self._session.points) + 1
        )
        return self._move(AppState.NAMING_POINT, Effect.POINT_STAGED)

    def _confirm_point(self, event: Confirm) -> Transition:
        try:
            self._session.add_point(event.name, self._pending_point)
        except InvalidNameError:
            return self._reject("Enter a name for the point")
        self._clear_pending()
        return self._move(AppState.READY, Effect.POINT_ADDED)

    def _cancel_point(self, event: Cancel) -> Transition:
        self._clear_pending()
        return self._move(AppState.READY, Effect.POINT_DISCARDED)

    def _start_area(self, event: StartArea) -> Transition:
        self._area_vertices = []
        return self._move(AppState.DEFINING_AREA, Effect.AREA_STARTED)

    def _add_vertex(self, event: Click) -> Transition:
        name = self._next_name("vertex_name_template", len(self._area_vertices) + 1)
        self._area_vertices.append(self._session.measure(event.position, name))
        return self._move(AppState.DEFINING_AREA, Effect.VERTEX_ADDED)

    def _finish_area(self, event: FinishArea) -> Transition:
        if len(self._area_vertices) < MIN_AREA_VERTICES:
            return self._reject(
                f"At least {MIN_AREA_VERTICES} points are needed to define an area"
            )
        self._pending_name = self._next_name(
            "area_name_template", len(self._session.areas) + 1
        )
        return self._move(AppState.NAMING_AREA, Effect.AREA_STAGED)

    def _cancel_area(self, event: Cancel) -> Transition:
        self._area_vertices = []
        return self._move(AppState.READY, Effect.AREA_DISCARDED)

    def _confirm_area(self, event: Confirm) -> Transition:
        try:
            self._session.add_area(event.name, self._area_vertices)
        except InvalidNameError:
            return self._reject("Enter a name for the area")
        self._area_vertices = []
        self._pending_name = ""
        return self._move(AppState.READY, Effect.AREA_ADDED)

    def _cancel_area_naming(self, event: Cancel) -> Transition:
        self._pending_name = ""
        return self._move(AppState.DEFINING_AREA, Effect.AREA_NAMING_CANCELLED)

    def _reset(self, event: Reset) -> Transition:
        self._session.reset(self._default_known_distance())
        self._clear_pending()
        self._area_vertices = []
        return self._move(AppState.UPLOAD_IMAGE, Effect.RESET)

    # --- Helpers ---

    def _move(
        self,
        state: AppState,
        effect: Effect,
        accepted: bool = True,
        message: str = "",
    ) -> Transition:
        previous = self._state
        self._state = state
        logger.debug(f"{previous.name} -> {state.name} ({effect.value})")
        return Transition(
            previous=previous, state=state, accepted=accepted, effect=effect, message=message
        )

    def _reject(self, message: str) -> Transition:
        logger.warning(f"Input rejected in {self._state.name}: {message}")
        return Transition(
            previous=self._state, state=self._state, accepted=False, message=message
        )

    def _clear_pending(self):
        self._pending_point = None
        self._pending_name = ""

    def _setting(self, group: str, key: str):
        return self._config.get(group, key, default_value(group, key))

    def _default_known_distance(self) -> float:
        return float(self._setting("calibration", "default_known_distance"))

    def _next_name(self, template_key: str, n: int) -> str:
        return self._setting("naming", template_key).format(n=n)
