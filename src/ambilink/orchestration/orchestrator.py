"""Fan-out of effects, frames and power events to every target."""

import logging
from concurrent.futures import Future
from threading import Lock

from ambilink.exceptions import ErrorContext
from ambilink.models import AppConfig, Color, ContentEffect, FrameBuffer, PowerMode, TargetId
from ambilink.protocols import TargetEvent
from ambilink.targets import TargetHandler, TargetRegistry

logger = logging.getLogger(__name__)


class Orchestrator:
    """
    Coordinates all configured targets.

    The orchestrator owns the handlers, remembers the current effect and
    static color in the application config, and keeps track of targets that
    gave up reconnecting. It is the observer of every handler.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        handlers: list[TargetHandler] | None = None,
    ):
        """
        Initialize orchestrator.

        Args:
            config: Application configuration (loads default if None)
            handlers: Target handlers (built from ``config`` if None)
        """
        self.config = config or AppConfig.load_or_default()
        if handlers is None:
            handlers = TargetRegistry(self.config).create_enabled()
        self._handlers: dict[TargetId, TargetHandler] = {h.name: h for h in handlers}

        self._lost: set[TargetId] = set()
        self._lost_lock = Lock()

        for handler in self._handlers.values():
            handler.register_observer(self)

    @property
    def handlers(self) -> list[TargetHandler]:
        return list(self._handlers.values())

    @property
    def current_effect(self) -> ContentEffect:
        return self.config.current_effect

    @property
    def lost_targets(self) -> set[TargetId]:
        """Targets whose reconnect budget ran out since their last connect."""
        with self._lost_lock:
            return set(self._lost)

    def get(self, target: TargetId) -> TargetHandler | None:
        return self._handlers.get(target)

    # ================================================================
    # LIFECYCLE
    # ================================================================

    def initialise(self) -> None:
        """Start connecting every target."""
        for handler in self._handlers.values():
            handler.initialise()
        logger.info(f"Initialising {len(self._handlers)} target(s)")

    def wait_until_connected(self, timeout: float | None = None) -> dict[TargetId, bool]:
        """Block until each target's connect sequence has finished."""
        return {
            target: handler.supervisor.wait_for_connect(timeout)
            for target, handler in self._handlers.items()
        }

    def shutdown(self) -> None:
        """Dispose every handler. Errors are logged, not raised."""
        for handler in self._handlers.values():
            with ErrorContext(f"dispose {handler.name.value}", re_raise=False):
                handler.dispose()
        logger.info("All targets disposed")

    def __enter__(self) -> "Orchestrator":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()

    # ================================================================
    # FAN-OUT
    # ================================================================

    def change_effect(self, effect: ContentEffect) -> dict[TargetId, bool]:
        """
        Switch every target to ``effect``.

        Returns:
            Per target, whether the effect's initial color was sent
        """
        self.config.current_effect = effect
        logger.info(f"Effect changed to {effect.value}")
        return {target: handler.change_effect(effect) for target, handler in self._handlers.items()}

    def change_static_color(self, color: Color) -> dict[TargetId, bool]:
        """Set the static color and re-apply it where static color is active."""
        self.config.static_color = color
        if self.current_effect is not ContentEffect.STATIC_COLOR:
            return {target: False for target in self._handlers}
        return self.change_effect(ContentEffect.STATIC_COLOR)

    def change_image(self, frame: FrameBuffer) -> dict[TargetId, Future]:
        """Hand a captured frame to every target that wants it."""
        futures = {}
        for target, handler in self._handlers.items():
            future = handler.change_image(frame)
            if future is not None:
                futures[target] = future
        return futures

    def power_mode_changed(self, mode: PowerMode) -> None:
        logger.info(f"Power mode changed: {mode.value}")
        for handler in self._handlers.values():
            handler.power_mode_changed(mode)

    # ================================================================
    # TargetObserver
    # ================================================================

    def on_target_event(self, event: TargetEvent, target: TargetId) -> None:
        with self._lost_lock:
            if event is TargetEvent.CONNECTION_LOST:
                self._lost.add(target)
            elif event is TargetEvent.CONNECTED:
                self._lost.discard(target)

        if event is TargetEvent.CONNECTION_LOST:
            logger.warning(f"{target.value} - Connection lost, giving up until next initialise")
        else:
            logger.info(f"{target.value} - Connected")
