"""Base class for lighting target handlers."""

import logging
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor

from ambilink.core import ColorPipeline, ConnectionSupervisor, strategy_for
from ambilink.models import (
    PRIORITY_STATIC,
    AppConfig,
    ColorCommand,
    ContentEffect,
    FrameBuffer,
    PowerMode,
    TargetConfig,
    TargetId,
    TargetInfo,
)
from ambilink.protocols import TargetEvent, TargetObserver
from ambilink.utils import ObserverManager

from . import protocol

logger = logging.getLogger(__name__)


class TargetHandler(ABC):
    """
    Drives one lighting target.

    A handler owns a connection supervisor, a color pipeline and a
    single-worker executor for frame processing. Public methods never raise
    transport errors: failures are logged and recovered by the supervisor.

    Subclasses provide the target's identity (``info``) and its transport;
    the line protocol and power handling are shared.
    """

    # Appended to every encoded command
    line_terminator: bytes = b""

    def __init__(
        self,
        app_config: AppConfig,
        target_config: TargetConfig,
        supervisor: ConnectionSupervisor,
    ):
        """
        Initialize target handler.

        Args:
            app_config: Application settings (static color, initial effect)
            target_config: Settings of this target
            supervisor: Connection supervisor for this target's transport
        """
        self._app_config = app_config
        self._config = target_config
        self._supervisor = supervisor
        self._pipeline = ColorPipeline(
            min_diversion=target_config.min_diversion,
            min_color_difference=target_config.min_color_difference,
        )
        self._current_effect = app_config.current_effect
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix=f"{self.info.target.value}-frames"
        )
        self._observers: ObserverManager[TargetObserver] = ObserverManager(
            observer_type_name="target"
        )

        self._supervisor.on_connected(self._handle_connected)
        self._supervisor.on_connection_lost(self._handle_connection_lost)

    # ================================================================
    # IDENTITY AND STATE
    # ================================================================

    @property
    @abstractmethod
    def info(self) -> TargetInfo:
        """Identity and capabilities of this target."""
        ...

    @property
    def name(self) -> TargetId:
        return self.info.target

    @property
    def current_effect(self) -> ContentEffect:
        return self._current_effect

    @property
    def pipeline(self) -> ColorPipeline:
        return self._pipeline

    @property
    def supervisor(self) -> ConnectionSupervisor:
        return self._supervisor

    @property
    def is_connected(self) -> bool:
        return self._supervisor.is_connected

    def register_observer(self, observer: TargetObserver) -> None:
        self._observers.register(observer)

    def unregister_observer(self, observer: TargetObserver) -> None:
        self._observers.unregister(observer)

    # ================================================================
    # CONNECTION
    # ================================================================

    def initialise(self, force: bool = False) -> bool:
        """Start connecting to the target. See ``ConnectionSupervisor.initialise``."""
        return self._supervisor.initialise(force)

    def reinitialise(self, force: bool = False) -> bool:
        """Reconnect if ``reinit_on_error`` is enabled or ``force`` is set."""
        return self._supervisor.reinitialise(force)

    def _handle_connected(self) -> None:
        # A fresh connection starts from the current effect
        self.change_effect(self._current_effect)
        self._observers.notify("on_target_event", TargetEvent.CONNECTED, self.name)

    def _handle_connection_lost(self) -> None:
        self._observers.notify("on_target_event", TargetEvent.CONNECTION_LOST, self.name)

    # ================================================================
    # COMMANDS
    # ================================================================

    def encode(self, command: ColorCommand) -> bytes:
        return protocol.encode_color(command, terminator=self.line_terminator)

    def encode_power(self, on: bool) -> bytes:
        return protocol.encode_power(on, terminator=self.line_terminator)

    def change_color(self, command: ColorCommand) -> bool:
        """
        Send a color command.

        Returns:
            True if the command was queued for sending
        """
        return self._supervisor.send(self.encode(command))

    def change_effect(self, effect: ContentEffect) -> bool:
        """
        Make ``effect`` current and send its initial color.

        Static color sends the configured color; every other effect starts
        from black until frames arrive.

        Returns:
            False if the target is not connected
        """
        self._current_effect = effect
        if not self.is_connected:
            return False

        if not self.info.supports(effect):
            logger.warning(f"{self.name.value} - Effect {effect.value} not supported")
            effect = ContentEffect.UNDEFINED

        if effect is ContentEffect.STATIC_COLOR:
            command = ColorCommand(
                color=self._app_config.static_color, priority=PRIORITY_STATIC, brightness=0
            )
        else:
            command = ColorCommand.off()

        self.change_color(command)
        return True

    def change_image(self, frame: FrameBuffer) -> Future | None:
        """
        Queue a captured frame for color extraction.

        Returns immediately. The frame is copied if its buffer is mutable.

        Returns:
            Future resolving to the command sent (or None), or None if the
            frame was skipped
        """
        if not self.is_connected:
            return None

        effect = self._current_effect
        if not effect.is_frame_driven or not self.info.supports(effect):
            return None

        if not isinstance(frame.data, bytes):
            frame = frame.detached()

        try:
            return self._executor.submit(self._process_frame, frame, effect)
        except RuntimeError:
            logger.debug(f"{self.name.value} - Frame dropped, handler disposed")
            return None

    def _process_frame(self, frame: FrameBuffer, effect: ContentEffect) -> ColorCommand | None:
        try:
            command = self._pipeline.process(frame, effect)
        except ValueError as e:
            logger.error(f"{self.name.value} - Error during average color calculations: {e}")
            return None

        if command is None:
            return None

        if not self.change_color(command):
            logger.debug(f"{self.name.value} - Frame color not sent, memory kept")
            return None

        self._pipeline.commit(strategy_for(effect), command.color)
        return command

    # ================================================================
    # POWER
    # ================================================================

    def power_mode_changed(self, mode: PowerMode) -> None:
        """React to the host suspending or resuming."""
        if mode is PowerMode.RESUME:
            self._resume()
        elif mode is PowerMode.SUSPEND:
            self._suspend()

    def _resume(self) -> None:
        self._supervisor.disconnect()
        self._reconnect_after_resume()

    def _reconnect_after_resume(self) -> None:
        if self._config.enable_on_resume:
            self._supervisor.defer_power_on(self.encode_power(True))
        self._supervisor.initialise()

    def _suspend(self) -> None:
        if self._config.disable_on_suspend and self.is_connected:
            self._supervisor.send(self.encode_power(False))

    # ================================================================
    # TEARDOWN
    # ================================================================

    def dispose(self) -> None:
        """Close the connection and stop all background work."""
        self._supervisor.shutdown()
        self._executor.shutdown(wait=False, cancel_futures=True)
        self._observers.clear()
        logger.info(f"{self.name.value} - Disposed")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name.value}, effect={self._current_effect.value})"
