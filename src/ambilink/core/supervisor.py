"""Connection supervisor: connect, retry, recover, and serialize sends.

Phases::

    IDLE ──initialise()──▶ CONNECTING ──connected──▶ CONNECTED
      ▲                        │                         │
      └── retries exhausted ◀──┘                         │
      └──────────── send failure / disconnect() ◀────────┘

Only one connect sequence is live per target. A non-forced ``initialise``
while CONNECTING is a no-op; a forced one starts a new sequence and the old
one exits at its next check (each sequence carries a generation number).

Commands go through a bounded queue drained by a single worker thread, so
callers never block on network I/O and writes to the target never
interleave.
"""

import logging
import threading
import time
from collections.abc import Callable
from queue import Empty, Full, Queue

from ambilink.exceptions import AmbilinkError, ConnectError, SendError
from ambilink.models import ConnectionPhase
from ambilink.transports import Connection, Transport

logger = logging.getLogger(__name__)

_VALID_TRANSITIONS: dict[ConnectionPhase, frozenset[ConnectionPhase]] = {
    ConnectionPhase.IDLE: frozenset({ConnectionPhase.CONNECTING}),
    ConnectionPhase.CONNECTING: frozenset(
        {ConnectionPhase.CONNECTING, ConnectionPhase.CONNECTED, ConnectionPhase.IDLE}
    ),
    ConnectionPhase.CONNECTED: frozenset({ConnectionPhase.CONNECTING, ConnectionPhase.IDLE}),
}

# Queue sentinel that stops the send worker
_STOP = object()


class ConnectionSupervisor:
    """
    Owns the connection to one target and keeps it alive.

    The connection handle is private to the supervisor and replaced, never
    reused, on each connect attempt.
    """

    def __init__(
        self,
        name: str,
        transport: Transport,
        max_attempts: int = 5,
        reconnect_delay: float = 2.0,
        connect_timeout: float = 5.0,
        reinit_on_error: bool = True,
        power_on_settle_delay: float = 2.0,
        queue_size: int = 64,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize connection supervisor.

        Args:
            name: Target name used in log messages
            transport: Factory for connections to the target
            max_attempts: Retries after the first failed connect
            reconnect_delay: Pause between connect attempts (seconds)
            connect_timeout: Timeout for one connect attempt (seconds)
            reinit_on_error: Reconnect automatically after a send failure
            power_on_settle_delay: Pause after a deferred power-on command (seconds)
            queue_size: Pending commands kept before new ones are dropped
            sleep: Sleep function (injectable for tests)
        """
        self._name = name
        self._transport = transport
        self._max_attempts = max_attempts
        self._reconnect_delay = reconnect_delay
        self._connect_timeout = connect_timeout
        self._reinit_on_error = reinit_on_error
        self._power_on_settle_delay = power_on_settle_delay
        self._sleep = sleep

        self._lock = threading.Lock()
        self._phase = ConnectionPhase.IDLE
        self._connection: Connection | None = None
        self._retries = 0
        self._generation = 0
        self._apply_effect_pending = False
        self._deferred_power_on: bytes | None = None
        self._connect_thread: threading.Thread | None = None

        self._queue: Queue = Queue(maxsize=queue_size)
        self._worker: threading.Thread | None = None

        self._on_connected: Callable[[], None] | None = None
        self._on_connection_lost: Callable[[], None] | None = None

    # ================================================================
    # CALLBACKS
    # ================================================================

    def on_connected(self, callback: Callable[[], None]) -> None:
        """Register callback run once after a connect sequence succeeds."""
        self._on_connected = callback

    def on_connection_lost(self, callback: Callable[[], None]) -> None:
        """Register callback run once when the retry budget is exhausted."""
        self._on_connection_lost = callback

    def _fire(self, callback: Callable[[], None] | None, what: str) -> None:
        if callback is None:
            return
        try:
            callback()
        except Exception as e:
            logger.error(f"{self._name} - Error in {what} callback: {e}", exc_info=True)

    # ================================================================
    # STATE
    # ================================================================

    @property
    def name(self) -> str:
        return self._name

    @property
    def phase(self) -> ConnectionPhase:
        with self._lock:
            return self._phase

    @property
    def retries(self) -> int:
        with self._lock:
            return self._retries

    @property
    def is_connected(self) -> bool:
        """True only when CONNECTED and the handle is still usable."""
        with self._lock:
            return (
                self._phase is ConnectionPhase.CONNECTED
                and self._connection is not None
                and self._connection.is_connected
            )

    def _set_phase(self, new: ConnectionPhase) -> None:
        """Move to ``new``. Must be called with ``_lock`` held."""
        if new not in _VALID_TRANSITIONS[self._phase]:
            raise RuntimeError(f"{self._name}: invalid transition {self._phase.value} -> {new.value}")
        logger.debug(f"{self._name} - {self._phase.value} -> {new.value}")
        self._phase = new

    # ================================================================
    # CONNECT SEQUENCE
    # ================================================================

    def initialise(self, force: bool = False) -> bool:
        """
        Start a connect sequence in the background.

        Args:
            force: Start even if a sequence is already running; the running
                one is superseded

        Returns:
            True if a sequence was started, False if one is already running
        """
        self._ensure_worker()

        with self._lock:
            if self._phase is ConnectionPhase.CONNECTING and not force:
                logger.debug(f"{self._name} - Initialising locked.")
                return False

            self._set_phase(ConnectionPhase.CONNECTING)
            self._retries = 0
            self._generation += 1
            generation = self._generation
            self._apply_effect_pending = True

            thread = threading.Thread(
                target=self._connect_sequence,
                args=(generation,),
                daemon=True,
                name=f"{self._name}-connect",
            )
            self._connect_thread = thread
            thread.start()

        return True

    def reinitialise(self, force: bool = False) -> bool:
        """
        Reconnect if the auto-recover policy allows it.

        Returns:
            True if a connect sequence was started
        """
        if not (self._reinit_on_error or force):
            logger.debug(f"{self._name} - Reinitialise skipped, recovery on error disabled")
            return False
        return self.initialise(force)

    def defer_power_on(self, payload: bytes) -> None:
        """Send ``payload`` right after the next connect sequence succeeds."""
        with self._lock:
            self._deferred_power_on = payload

    def wait_for_connect(self, timeout: float | None = None) -> bool:
        """
        Block until the running connect sequence has finished.

        Returns:
            True if the target is connected afterwards
        """
        with self._lock:
            thread = self._connect_thread
        if thread is not None:
            thread.join(timeout)
        return self.is_connected

    def _connect_sequence(self, generation: int) -> None:
        try:
            self._transport.prepare()
        except AmbilinkError as e:
            logger.error(f"{self._name} - {e.technical_message}")
            self._finish(generation, exhausted=False)
            return

        exhausted = False
        while True:
            with self._lock:
                if generation != self._generation:
                    return
                stale = self._connection
                if stale is not None and stale.is_connected:
                    logger.debug(f"{self._name} - Already connected to {stale.endpoint}")
                    break
                self._connection = None

            if stale is not None:
                stale.close()

            try:
                connection = self._transport.connect(self._connect_timeout)
            except ConnectError as e:
                logger.error(f"{self._name} - Error while connecting: {e.technical_message}")
                with self._lock:
                    # A superseded sequence must not spend the new one's budget
                    if generation != self._generation:
                        return
                    self._retries += 1
                    retries = self._retries
                if retries > self._max_attempts:
                    logger.error(
                        f"{self._name} - Error while connecting and connection attempts exhausted"
                    )
                    exhausted = True
                    break
                self._sleep(self._reconnect_delay)
                continue

            with self._lock:
                current = generation == self._generation
                if current:
                    self._connection = connection
            if not current:
                connection.close()
                return

            logger.info(f"{self._name} - Connected to {connection.endpoint}")
            break

        self._finish(generation, exhausted)

    def _finish(self, generation: int, exhausted: bool) -> None:
        """Release the init-lock and run post-connect actions."""
        with self._lock:
            if generation != self._generation:
                return
            connected = self._connection is not None and self._connection.is_connected
            self._set_phase(ConnectionPhase.CONNECTED if connected else ConnectionPhase.IDLE)
            self._retries = 0
            power_on = self._deferred_power_on
            self._deferred_power_on = None
            apply_effect = self._apply_effect_pending
            self._apply_effect_pending = False

        if exhausted:
            self._fire(self._on_connection_lost, "connection lost")

        if power_on is not None and connected:
            self.send(power_on)
            # Give the bridge time to start up
            self._sleep(self._power_on_settle_delay)

        if apply_effect and connected:
            self._fire(self._on_connected, "connected")

    # ================================================================
    # SENDING
    # ================================================================

    def send(self, payload: bytes) -> bool:
        """
        Queue a command for the target.

        Returns:
            True if queued, False if not connected or the queue is full
        """
        if not self.is_connected:
            return False

        try:
            self._queue.put_nowait(payload)
        except Full:
            logger.warning(f"{self._name} - Command queue full, dropped command")
            return False
        return True

    def flush(self, timeout: float = 1.0) -> bool:
        """
        Wait until every queued command has been written (or dropped).

        Returns:
            True if the queue drained within ``timeout``
        """
        deadline = time.monotonic() + timeout
        with self._queue.all_tasks_done:
            while self._queue.unfinished_tasks:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False
                self._queue.all_tasks_done.wait(remaining)
        return True

    def _ensure_worker(self) -> None:
        with self._lock:
            if self._worker is not None and self._worker.is_alive():
                return
            self._worker = threading.Thread(
                target=self._send_loop, daemon=True, name=f"{self._name}-send"
            )
            self._worker.start()

    def _send_loop(self) -> None:
        while True:
            payload = self._queue.get()
            try:
                if payload is _STOP:
                    return
                self._write(payload)
            finally:
                self._queue.task_done()

    def _write(self, payload: bytes) -> None:
        with self._lock:
            connection = self._connection if self._phase is ConnectionPhase.CONNECTED else None

        if connection is None:
            logger.debug(f"{self._name} - Not connected, dropped command")
            return

        try:
            connection.send(payload)
        except SendError as e:
            logger.error(f"{self._name} - Error during sending: {e.technical_message}")
            self._drop(connection)
            self.reinitialise(False)

    def _drop(self, connection: Connection) -> None:
        """Forget a connection that failed, if it is still the current one."""
        with self._lock:
            if self._connection is connection:
                self._connection = None
                if self._phase is ConnectionPhase.CONNECTED:
                    self._set_phase(ConnectionPhase.IDLE)
        connection.close()

    # ================================================================
    # TEARDOWN
    # ================================================================

    def disconnect(self) -> None:
        """Close the current connection, if any."""
        with self._lock:
            connection = self._connection
            self._connection = None
            if self._phase is ConnectionPhase.CONNECTED:
                self._set_phase(ConnectionPhase.IDLE)

        if connection is not None:
            connection.close()
            logger.info(f"{self._name} - Disconnected from {connection.endpoint}")

    def shutdown(self, timeout: float = 1.0) -> None:
        """Close the connection, abandon any connect sequence, stop the send worker."""
        self.disconnect()

        with self._lock:
            # Running connect sequences see a new generation and exit
            self._generation += 1
            if self._phase is ConnectionPhase.CONNECTING:
                self._set_phase(ConnectionPhase.IDLE)
            worker = self._worker
            self._worker = None

        if worker is None:
            return

        # Pending commands have nowhere to go
        while True:
            try:
                self._queue.get_nowait()
            except Empty:
                break
            self._queue.task_done()

        self._queue.put(_STOP)
        worker.join(timeout=timeout)
        logger.debug(f"{self._name} - Supervisor stopped")
