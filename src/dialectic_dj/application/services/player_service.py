"""Player Application Service - single-task orchestrator for remote playback.

One asyncio task owns the play queue, the in-progress track and the target
device. Everything else talks to it through a bounded command channel, either
directly (wake timers) or through the ``PlayerCommander`` facade.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypeVar

from ...domain.music.entities import InProgressTrack, PlayerState, TargetDevice, TrackQueue
from ...domain.music.value_objects import TrackId
from ...domain.shared.constants import PlayerConstants
from ...domain.shared.exceptions import (
    ChannelClosedError,
    DomainError,
    NoPlaybackDeviceError,
    RemoteServiceError,
)
from ...domain.shared.messages import ErrorMessages, LogTemplates
from ..commands.player_commands import (
    AddTrackCommand,
    GetCurrentTrackCommand,
    GetTrackQueueCommand,
    PlayerCommand,
    StartCommand,
    WakeCommand,
)

if TYPE_CHECKING:
    from ...domain.music.entities import PlaybackSnapshot, Track
    from ...domain.music.repository import TrackStore
    from ..interfaces.music_service import MusicService
    from .credential_provider import CredentialProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[Any]]


def _resolve(
    reply: asyncio.Future, *, result: Any = None, error: BaseException | None = None
) -> None:
    # The caller may have given up on the reply already
    if reply.done():
        return
    if error is not None:
        reply.set_exception(error)
    else:
        reply.set_result(result)


class PlayerOrchestrator:
    """Actor that decides what plays now and what plays next.

    Commands are processed one at a time in arrival order. After staging a
    track the orchestrator arms a timer that posts a ``WakeCommand`` shortly
    before the track ends; the wake re-reads live playback and stages the
    next queued track. Timers are never cancelled on restage, a late wake
    is harmless because it re-validates and an empty queue pops nothing.
    """

    def __init__(
        self,
        *,
        credentials: CredentialProvider,
        track_store: TrackStore | None = None,
        wake_lead_seconds: float = PlayerConstants.WAKE_LEAD_SECONDS,
        command_queue_size: int = PlayerConstants.COMMAND_QUEUE_SIZE,
        remote_call_timeout_s: float = PlayerConstants.REMOTE_CALL_TIMEOUT_SECONDS,
        restore_limit: int = 500,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self._credentials = credentials
        self._store = track_store
        self._wake_lead = wake_lead_seconds
        self._remote_timeout = remote_call_timeout_s
        self._restore_limit = restore_limit
        self._sleep = sleep

        self._commands: asyncio.Queue[PlayerCommand] = asyncio.Queue(maxsize=command_queue_size)
        self._queue = TrackQueue()
        self._currently_playing: InProgressTrack | None = None
        self._target_device: TargetDevice | None = None

        self._task: asyncio.Task | None = None
        self._timers: set[asyncio.Task] = set()

        self._handlers: dict[type, Callable[[Any], Awaitable[None]]] = {
            StartCommand: self._handle_start,
            WakeCommand: self._handle_wake,
            AddTrackCommand: self._handle_add_track,
            GetCurrentTrackCommand: self._handle_get_current_track,
            GetTrackQueueCommand: self._handle_get_track_queue,
        }

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def currently_playing(self) -> InProgressTrack | None:
        return self._currently_playing

    @property
    def target_device(self) -> TargetDevice | None:
        return self._target_device

    @property
    def pending_timers(self) -> int:
        return sum(1 for timer in self._timers if not timer.done())

    async def start(self) -> None:
        if self.is_running:
            logger.warning(LogTemplates.PLAYER_ALREADY_RUNNING)
            return

        if self._store is not None and not self._queue:
            await self._restore_queue()

        self._task = asyncio.create_task(self._run(), name="player-orchestrator")
        self._task.add_done_callback(self._on_task_done)
        logger.info(LogTemplates.PLAYER_STARTED)

    async def stop(self) -> None:
        # The actor arms timers, so it must be gone before they are reaped
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        while self._timers:
            timers = list(self._timers)
            for timer in timers:
                timer.cancel()
            await asyncio.gather(*timers, return_exceptions=True)
            self._timers.difference_update(timers)

        self._reject_pending()
        logger.info(LogTemplates.PLAYER_STOPPED)

    def _on_task_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(LogTemplates.PLAYER_CRASHED, exc_info=error)

    async def drain(self) -> None:
        """Wait until no command is queued and no wake timer is pending.

        Raises:
            ChannelClosedError: The orchestrator task is not running.
        """
        while True:
            await self._guard(self._commands.join())

            pending = [timer for timer in self._timers if not timer.done()]
            if not pending:
                if self._commands.empty():
                    return
                continue

            await self._guard(asyncio.wait(pending))

    async def send(self, command: PlayerCommand) -> None:
        """Post a command, waiting for room when the channel is full."""
        if not self.is_running:
            raise ChannelClosedError(ErrorMessages.PLAYER_NOT_RUNNING)
        await self._guard(self._commands.put(command))

    async def await_reply(self, reply: asyncio.Future[T]) -> T:
        """Wait for a command's reply, failing if the orchestrator stops first."""
        return await self._guard(reply)

    async def _guard(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the orchestrator task ends first."""
        if not self.is_running:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise ChannelClosedError(ErrorMessages.PLAYER_NOT_RUNNING)

        waiter = asyncio.ensure_future(awaitable)
        assert self._task is not None
        try:
            await asyncio.wait({waiter, self._task}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            waiter.cancel()
            raise

        if waiter.done():
            return waiter.result()

        waiter.cancel()
        raise ChannelClosedError(ErrorMessages.PLAYER_NOT_RUNNING)

    async def _restore_queue(self) -> None:
        assert self._store is not None
        try:
            tracks = await self._store.list_queue(self._restore_limit)
        except Exception as e:
            logger.warning(LogTemplates.STORE_FAILED, "list_queue", e)
            return

        self._queue.extend(tracks)
        if tracks:
            logger.info(LogTemplates.PLAYER_QUEUE_RESTORED, len(tracks))

    def _reject_pending(self) -> None:
        while not self._commands.empty():
            command = self._commands.get_nowait()
            reply = getattr(command, "reply", None)
            if reply is not None:
                _resolve(
                    reply,
                    error=ChannelClosedError(
                        ErrorMessages.PLAYER_STOPPED_BEFORE_REPLY.format(
                            command=type(command).__name__
                        )
                    ),
                )
            self._commands.task_done()

    # ------------------------------------------------------------------
    # Actor loop
    # ------------------------------------------------------------------

    async def _run(self) -> None:
        while True:
            command = await self._commands.get()
            name = type(command).__name__
            logger.debug(LogTemplates.PLAYER_COMMAND_RECEIVED, name)
            try:
                await self._handlers[type(command)](command)
            except Exception as e:
                logger.exception(LogTemplates.PLAYER_COMMAND_FAILED, name)
                reply = getattr(command, "reply", None)
                if reply is not None:
                    _resolve(reply, error=e)
            finally:
                self._commands.task_done()

    async def _handle_start(self, _: StartCommand) -> None:
        try:
            client = await self._credentials.acquire_client()
            if client is None:
                logger.warning(LogTemplates.CREDENTIALS_MISSING)
                return

            device = await self._ensure_device(client)

            track = self._queue.pop_front()
            if track is None:
                logger.info(LogTemplates.START_EMPTY_QUEUE)
                return
        except DomainError as e:
            logger.error(LogTemplates.START_FAILED, e.message)
            return

        if not await self._stage(client, device, track):
            return

        try:
            await self._remote("skip_to_next", client.skip_to_next(device.id))
        except DomainError as e:
            logger.error(LogTemplates.SKIP_FAILED, e.message)

    async def _handle_wake(self, _: WakeCommand) -> None:
        logger.debug(LogTemplates.WAKE_RECEIVED, len(self._queue))
        try:
            client = await self._credentials.acquire_client()
            if client is None:
                logger.warning(LogTemplates.CREDENTIALS_MISSING)
                return

            snapshot = await self._remote("current_playback", client.current_playback())
        except DomainError as e:
            logger.error(LogTemplates.WAKE_FAILED, e.message)
            return

        if snapshot is None:
            logger.info(LogTemplates.WAKE_NO_PLAYBACK)
            return

        if self._target_device is None and snapshot.device is not None:
            self._set_device(snapshot.device)

        device = self._target_device
        next_track = self._queue.peek()
        if next_track is None:
            logger.info(LogTemplates.WAKE_EMPTY_QUEUE)
            return
        if device is None:
            logger.warning(LogTemplates.DEVICE_UNRESOLVED, next_track.name)
            return

        track = self._queue.pop_front()
        assert track is not None
        await self._stage(client, device, track)

    async def _handle_add_track(self, command: AddTrackCommand) -> None:
        try:
            client = await self._credentials.require_client()
            track = await self._remote("get_track", client.get_track(command.track_id))
        except DomainError as e:
            logger.warning(LogTemplates.TRACK_QUEUE_FAILED, command.track_id, e.message)
            _resolve(command.reply, error=e)
            return

        self._queue.append(track)
        await self._mirror("add_to_queue", track)
        logger.info(LogTemplates.TRACK_QUEUED, track.name, track.id, len(self._queue))
        _resolve(command.reply, result=track)

    async def _handle_get_current_track(self, command: GetCurrentTrackCommand) -> None:
        try:
            client = await self._credentials.require_client()
            snapshot = await self._remote("current_playback", client.current_playback())
        except DomainError as e:
            logger.warning(LogTemplates.CURRENT_TRACK_FAILED, e.message)
            _resolve(command.reply, error=e)
            return

        _resolve(command.reply, result=snapshot.current_track if snapshot else None)

    async def _handle_get_track_queue(self, command: GetTrackQueueCommand) -> None:
        _resolve(command.reply, result=self._queue.snapshot())

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _remote(self, operation: str, call: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self._remote_timeout)
        except TimeoutError:
            raise RemoteServiceError(
                operation,
                ErrorMessages.REMOTE_TIMEOUT.format(operation=operation, timeout=self._remote_timeout),
            ) from None

    async def _ensure_device(self, client: MusicService) -> TargetDevice:
        if self._target_device is not None:
            return self._target_device

        try:
            snapshot: PlaybackSnapshot | None = await self._remote(
                "current_playback", client.current_playback()
            )
        except DomainError as e:
            logger.warning(LogTemplates.DEVICE_RESOLUTION_FAILED, e.message)
            raise

        if snapshot is None or snapshot.device is None:
            logger.warning(LogTemplates.DEVICE_RESOLUTION_FAILED, ErrorMessages.NO_PLAYBACK_DEVICE)
            raise NoPlaybackDeviceError(ErrorMessages.NO_PLAYBACK_DEVICE)

        return self._set_device(snapshot.device)

    def _set_device(self, device: TargetDevice) -> TargetDevice:
        self._target_device = device
        logger.info(LogTemplates.DEVICE_RESOLVED, device.name or device.id, device.type or "unknown")
        return device

    async def _stage(self, client: MusicService, device: TargetDevice, track: Track) -> bool:
        """Hand ``track`` to the device's queue and arm the wake timer."""
        try:
            await self._remote("add_to_queue", client.add_to_queue(track.id, device.id))
        except DomainError as e:
            self._queue.push_front(track)
            logger.error(LogTemplates.STAGE_FAILED, track.name, e.message)
            return False

        self._currently_playing = InProgressTrack(track=track)
        logger.info(LogTemplates.TRACK_STAGED, track.name, device.id)

        await self._mirror("pop_queue")
        await self._mirror("record_play", track)

        self._arm_wake(track)
        return True

    def _arm_wake(self, track: Track) -> None:
        # Counted from staging, not from when the track starts playing, so the
        # effective lead grows by about one lead per consecutively staged track.
        delay = track.seconds_until_wake(self._wake_lead)
        timer = asyncio.create_task(self._wake_after(delay), name=f"player-wake-{track.id}")
        self._timers.add(timer)
        timer.add_done_callback(self._timers.discard)
        logger.info(LogTemplates.WAKE_ARMED, delay, track.name)

    async def _wake_after(self, delay: float) -> None:
        await self._sleep(delay)
        await self._commands.put(WakeCommand())

    async def _mirror(self, operation: str, *args: Any) -> None:
        if self._store is None:
            return
        try:
            await getattr(self._store, operation)(*args)
        except Exception as e:
            logger.warning(LogTemplates.STORE_FAILED, operation, e)


class PlayerCommander:
    """Public handle on the orchestrator used by the route layer."""

    def __init__(self, orchestrator: PlayerOrchestrator) -> None:
        self._orchestrator = orchestrator

    @property
    def is_running(self) -> bool:
        return self._orchestrator.is_running

    async def start(self) -> None:
        """Ask the player to begin playing the queue."""
        await self._orchestrator.send(StartCommand())

    async def add_track(self, track_id: str | TrackId) -> Track:
        """Queue a track by id, URI or share URL.

        Raises:
            InvalidTrackIdError: ``track_id`` is malformed.
            TrackNotFoundError: The music service has no such track.
            NotAuthenticatedError: No credentials are installed.
            RemoteServiceError: The music service call failed.
        """
        if not isinstance(track_id, TrackId):
            track_id = TrackId.parse(track_id)
        return await self._request(AddTrackCommand(track_id=track_id))

    async def get_current_track(self) -> Track | None:
        return await self._request(GetCurrentTrackCommand())

    async def get_queued_tracks(self) -> list[Track]:
        return await self._request(GetTrackQueueCommand())

    async def get_current_state(self) -> PlayerState:
        current = await self.get_current_track()
        queue = await self.get_queued_tracks()
        return PlayerState(current_track=current, queue=queue)

    async def _request(
        self, command: AddTrackCommand | GetCurrentTrackCommand | GetTrackQueueCommand
    ) -> Any:
        await self._orchestrator.send(command)
        return await self._orchestrator.await_reply(command.reply)
