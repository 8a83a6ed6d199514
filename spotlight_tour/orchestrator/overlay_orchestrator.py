#!/usr/bin/env python3
"""
Overlay orchestrator - single-flight state machine for tutorial runs.

Coordinates readiness, target resolution, capture, rendering and
presentation for one tutorial. All state changes, busy gate updates, store
writes and host calls happen on the event loop the orchestrator is bound
to; capture and rendering run on their own executors.

Usage:
    from spotlight_tour.orchestrator import OverlayOrchestrator

    orchestrator = OverlayOrchestrator(
        host=window,
        config=TutorialConfig(tutorial_id="home_tour"),
        steps=[Step.for_tag("new_button", "Start here")],
        snapshot_provider=window,
        presentation_sink=dialog_host,
        state_store=JsonStateStore(Path("data/tutorial_state.json")),
    )
    orchestrator.show(user_id="42")
"""

import asyncio
import functools
import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Callable, Optional, Sequence

from spotlight_tour.capture.screen_capture import SnapshotProvider
from spotlight_tour.config.settings import Settings
from spotlight_tour.config.tunables import PipelineTimings, TooltipLayoutSettings
from spotlight_tour.errors import FailureKind, PipelineFailure
from spotlight_tour.models.image_buffer import ImageBuffer
from spotlight_tour.models.step import Step
from spotlight_tour.models.tutorial_config import TriggerKind, TutorialConfig
from spotlight_tour.orchestrator.busy_gate import BusyGate
from spotlight_tour.orchestrator.host import HostSurface
from spotlight_tour.orchestrator.run_state import RunOutcome, RunState, can_transition
from spotlight_tour.overlay.presentation import DismissHandle, PresentationResult, PresentationSink
from spotlight_tour.overlay.renderer import CompositingRenderer
from spotlight_tour.resolver.target_resolver import TargetResolver
from spotlight_tour.storage.state_store import TutorialStateStore

logger = logging.getLogger(__name__)

StateListener = Callable[[RunState, RunState], None]


class OverlayOrchestrator:
    """
    Runs one tutorial at a time for one host.

    Entry points show() and force_show() return immediately; the pipeline
    continues as a task on the bound event loop. A second request while a
    run is in flight is rejected, not queued.
    """

    PRESENTATION_TAG = "spotlight_tour.overlay"

    def __init__(self, host: HostSurface, config: TutorialConfig, steps: Sequence[Step],
                 snapshot_provider: SnapshotProvider, presentation_sink: PresentationSink,
                 state_store: TutorialStateStore,
                 renderer: Optional[CompositingRenderer] = None,
                 resolver: Optional[TargetResolver] = None,
                 timings: Optional[PipelineTimings] = None,
                 loop: Optional[asyncio.AbstractEventLoop] = None,
                 capture_executor: Optional[Executor] = None,
                 render_executor: Optional[Executor] = None,
                 on_state_change: Optional[StateListener] = None,
                 settings: Optional[Settings] = None):
        """
        Initialize the orchestrator.

        Args:
            host: Host surface being toured
            config: Tutorial configuration
            steps: Steps in display order
            snapshot_provider: Source of screen snapshots
            presentation_sink: Shows the rendered overlay
            state_store: Persists the "already shown" flag
            renderer: Overlay renderer. Defaults to CompositingRenderer() laid out from settings
            resolver: Target resolver. Defaults to TargetResolver()
            timings: Pipeline delays. Defaults to PipelineTimings() read from settings
            loop: Event loop to bind to. Defaults to the loop running at the first request
            capture_executor: Executor for snapshot capture (I/O bound)
            render_executor: Executor for rendering (CPU bound)
            on_state_change: Called with (old, new) on every state change
            settings: Settings holding overlay.* and renderer.* overrides.
                Only consulted for the renderer and timings not passed in
        """
        if settings is not None:
            if timings is None:
                timings = PipelineTimings.from_settings(settings)
            if renderer is None:
                renderer = CompositingRenderer(TooltipLayoutSettings.from_settings(settings))

        self.host = host
        self.config = config
        self.steps = tuple(steps)
        self.snapshot_provider = snapshot_provider
        self.presentation_sink = presentation_sink
        self.state_store = state_store
        self.renderer = renderer or CompositingRenderer()
        self.resolver = resolver or TargetResolver()
        self.timings = timings or PipelineTimings()
        self.on_state_change = on_state_change

        self._loop = loop
        self._owned_executors = []
        if capture_executor is None:
            capture_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="spotlight-capture")
            self._owned_executors.append(capture_executor)
        if render_executor is None:
            render_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="spotlight-render")
            self._owned_executors.append(render_executor)
        self._capture_executor = capture_executor
        self._render_executor = render_executor

        self._gate = BusyGate()
        self._state = RunState.IDLE
        self._generation = 0
        self._destroyed = False
        self._task: Optional[asyncio.Task] = None
        self._last_outcome: Optional[RunOutcome] = None
        self._last_rejection: Optional[RunOutcome] = None

        logger.info(f"OverlayOrchestrator initialized for '{config.tutorial_id}' with {len(self.steps)} steps")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._gate.held

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    @property
    def last_outcome(self) -> Optional[RunOutcome]:
        return self._last_outcome

    @property
    def last_rejection(self) -> Optional[RunOutcome]:
        """Most recent request turned away before a run started."""
        return self._last_rejection

    def show(self, user_id: Optional[str] = None) -> bool:
        """
        Show the tutorial unless it is in flight or was already shown.

        Returns:
            True if a run was started (or posted to the bound loop)
        """
        return self._request(user_id, force=False)

    def force_show(self, user_id: Optional[str] = None) -> bool:
        """Show the tutorial ignoring show_only_once, once the host is ready."""
        logger.debug(f"force_show called for user_id: {user_id}")
        return self._request(user_id, force=True)

    def start(self, user_id: Optional[str] = None) -> bool:
        """Show the tutorial if it is configured to appear on first launch."""
        if not self.config.has_trigger(TriggerKind.FIRST_LAUNCH):
            return False
        return self.show(user_id)

    def notify_event(self, event: str, user_id: Optional[str] = None) -> bool:
        """Show the tutorial if an event trigger matches event."""
        if not self.config.has_trigger(TriggerKind.EVENT, event):
            logger.debug(f"No trigger for event '{event}'")
            return False
        return self.show(user_id)

    def reset_shown(self, user_id: Optional[str] = None) -> None:
        """Forget that the tutorial was shown."""
        self.state_store.clear(self.config.tutorial_id, user_id)
        logger.info(f"Reset shown flag for '{self.config.tutorial_id}' (user: {user_id})")

    async def join(self) -> None:
        """Wait for the in-flight pipeline task, if any, to finish."""
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise

    def destroy(self) -> None:
        """
        Tear down the orchestrator.

        Idempotent. Cancels any in-flight run without waiting for it, releases
        the busy gate and never writes to the state store.
        """
        if self._destroyed:
            logger.debug("destroy() called again, ignoring")
            return

        if self._marshal(self.destroy):
            return

        self._destroyed = True
        self._generation += 1

        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            self._last_outcome = RunOutcome.failed(FailureKind.DESTROYED, "Run cancelled by destroy()",
                                                   self._state)

        self._gate.release()
        if self._state != RunState.IDLE:
            self._transition(RunState.IDLE)

        for executor in self._owned_executors:
            executor.shutdown(wait=False, cancel_futures=True)
        self._owned_executors = []

        logger.info(f"OverlayOrchestrator for '{self.config.tutorial_id}' destroyed")

    # ------------------------------------------------------------------
    # Request handling
    # ------------------------------------------------------------------

    def _request(self, user_id: Optional[str], force: bool) -> bool:
        if self._marshal(self._request, user_id, force):
            return True

        loop = self._running_loop()
        if loop is None:
            logger.error("Tutorial requests need a running event loop")
            return False
        if self._loop is None or self._loop.is_closed():
            self._loop = loop

        if self._destroyed:
            logger.warning("Orchestrator was destroyed, ignoring request")
            self._last_rejection = RunOutcome.failed(FailureKind.DESTROYED, "Orchestrator was destroyed")
            return False

        if not self._gate.try_acquire():
            logger.warning("Tutorial is already being processed")
            self._last_rejection = RunOutcome.failed(FailureKind.ALREADY_IN_FLIGHT,
                                                     "Tutorial is already being processed", self._state)
            return False

        if not force and self.config.show_only_once and \
                self.state_store.is_shown(self.config.tutorial_id, user_id):
            logger.debug(f"Tutorial already shown for user: {user_id}")
            self._gate.release()
            self._last_outcome = RunOutcome.failed(FailureKind.ALREADY_SHOWN, "Tutorial already shown")
            self._last_rejection = self._last_outcome
            return False

        self._generation += 1
        self._task = loop.create_task(self._run(self._generation, user_id, force))
        return True

    def _running_loop(self) -> Optional[asyncio.AbstractEventLoop]:
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None

    def _marshal(self, method: Callable, *args) -> bool:
        """Post method to the bound loop when called from another thread."""
        loop = self._loop
        if loop is None or self._running_loop() is loop:
            return False
        if loop.is_closed() or not loop.is_running():
            return False
        loop.call_soon_threadsafe(method, *args)
        return True

    def _is_live(self, generation: int) -> bool:
        return not self._destroyed and generation == self._generation

    def _ensure_live(self, generation: int, stage: str) -> None:
        if not self._is_live(generation):
            raise PipelineFailure(FailureKind.DESTROYED, "Orchestrator destroyed", stage, quiet=True)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    async def _run(self, generation: int, user_id: Optional[str], force: bool) -> None:
        try:
            self._transition(RunState.RESOLVING)
            if force:
                await self._await_readiness(generation)
            else:
                await asyncio.sleep(self.timings.settle_delay)
            self._ensure_live(generation, "settle")

            await self._run_pipeline(generation, user_id)

        except asyncio.CancelledError:
            logger.debug(f"Tutorial run {generation} cancelled")
            raise
        except PipelineFailure as failure:
            self._fail(generation, failure)
        except Exception as e:
            logger.error(f"Error showing tutorial: {e}", exc_info=True)
            self._fail(generation, PipelineFailure(FailureKind.UNEXPECTED, str(e), self._state.value))

    async def _await_readiness(self, generation: int) -> None:
        attempts = self.timings.readiness_max_attempts
        for attempt in range(1, attempts + 1):
            if self._is_host_ready():
                logger.debug(f"Host ready after {attempt} attempt(s)")
                return
            if attempt < attempts:
                await asyncio.sleep(self.timings.readiness_interval)
                self._ensure_live(generation, "readiness")

        raise PipelineFailure(
            FailureKind.READINESS_TIMEOUT,
            f"Host not ready after {attempts} attempts "
            f"({(attempts - 1) * self.timings.readiness_interval_ms}ms)",
            RunState.RESOLVING.value,
        )

    def _is_host_ready(self) -> bool:
        if self.host.is_finishing() or self.host.is_destroyed():
            return False
        width, height = self.host.surface_size()
        return width > 0 and height > 0 and self.host.has_focus()

    async def _run_pipeline(self, generation: int, user_id: Optional[str]) -> None:
        width, height = self.host.surface_size()
        logger.debug(f"Root surface dimensions: {width}x{height}")
        if width <= 0 or height <= 0:
            logger.debug("Root surface not laid out yet, waiting for layout")
            await self.host.wait_for_layout()
            self._ensure_live(generation, "layout")

        # One frame so pending layout passes land
        await asyncio.sleep(self.timings.frame_delay)
        self._ensure_live(generation, "layout")

        targets = self._resolve_targets()

        self._transition(RunState.CAPTURING)
        snapshot = await self._capture(generation)

        self._transition(RunState.RENDERING)
        overlay = await self._render(generation, snapshot, targets)

        if self.host.is_finishing() or self.host.is_destroyed():
            overlay.release()
            raise PipelineFailure(FailureKind.PRESENTATION_REJECTED, "Host is finishing or destroyed",
                                  RunState.RENDERING.value, quiet=True)

        self._transition(RunState.PRESENTING)
        self._present(generation, overlay, user_id)

    def _resolve_targets(self):
        report = self.resolver.resolve(self.host.root_node(), self.steps)
        if not report.targets:
            logger.warning(f"No valid targets found out of {len(self.steps)} steps")
            for entry in report.steps:
                logger.warning(f"  {entry}")
            raise PipelineFailure(FailureKind.NO_TARGETS_RESOLVED,
                                  f"None of {len(self.steps)} steps resolved",
                                  RunState.RESOLVING.value)

        for entry in report.unresolved():
            logger.debug(f"Skipping {entry}")
        logger.debug(f"Found {report.resolved_count} of {len(self.steps)} targets")
        return report.targets

    async def _capture(self, generation: int) -> ImageBuffer:
        loop = asyncio.get_running_loop()
        try:
            snapshot = await loop.run_in_executor(self._capture_executor,
                                                  self.snapshot_provider.capture_root_snapshot)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise PipelineFailure(FailureKind.CAPTURE_FAILURE, f"Snapshot capture raised: {e}",
                                  RunState.CAPTURING.value)

        if snapshot is None:
            raise PipelineFailure(FailureKind.CAPTURE_FAILURE, "Failed to create screenshot",
                                  RunState.CAPTURING.value)

        if not self._is_live(generation):
            snapshot.release()
            self._ensure_live(generation, "capture")

        logger.debug(f"Captured {snapshot}")
        return snapshot

    async def _render(self, generation: int, snapshot: ImageBuffer, targets) -> ImageBuffer:
        loop = asyncio.get_running_loop()
        render = functools.partial(
            self.renderer.render,
            snapshot.pixels,
            targets,
            self.config.overlay_color,
            self.config.style,
            self.host.density_scale,
            self.host.font_scale,
        )
        try:
            pixels = await loop.run_in_executor(self._render_executor, render)
        finally:
            snapshot.release()

        overlay = ImageBuffer(pixels, label="overlay")
        if not self._is_live(generation):
            overlay.release()
            self._ensure_live(generation, "render")
        return overlay

    def _present(self, generation: int, overlay: ImageBuffer, user_id: Optional[str]) -> None:
        handle = DismissHandle(
            functools.partial(self._on_dismiss_requested, generation, overlay, user_id),
            name=f"{self.config.tutorial_id} dismiss",
        )

        try:
            self.presentation_sink.dismiss_existing(self.PRESENTATION_TAG)
            result = self.presentation_sink.present(self.PRESENTATION_TAG, overlay.pixels,
                                                    self.config, handle)
        except Exception as e:
            overlay.release()
            if not handle.cancel():
                logger.warning(f"Sink dismissed the overlay and then raised: {e}")
                return
            raise PipelineFailure(FailureKind.PRESENTATION_REJECTED, f"Failed to show overlay: {e}",
                                  RunState.PRESENTING.value)

        if result != PresentationResult.ACCEPTED:
            overlay.release()
            # A sink that dismissed before rejecting has already completed the run
            if not handle.cancel():
                return
            raise PipelineFailure(FailureKind.PRESENTATION_REJECTED,
                                  "Presentation state is locked, cannot show overlay",
                                  RunState.PRESENTING.value)

        logger.info(f"Tutorial '{self.config.tutorial_id}' overlay shown successfully")

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def _on_dismiss_requested(self, generation: int, overlay: ImageBuffer,
                              user_id: Optional[str]) -> None:
        loop = self._loop
        if loop is not None and self._running_loop() is not loop \
                and loop.is_running() and not loop.is_closed():
            loop.call_soon_threadsafe(self._on_dismissed, generation, overlay, user_id)
            return
        self._on_dismissed(generation, overlay, user_id)

    def _on_dismissed(self, generation: int, overlay: ImageBuffer, user_id: Optional[str]) -> None:
        overlay.release()
        if not self._is_live(generation):
            logger.debug("Overlay dismissed after the run was invalidated, nothing to record")
            return

        self._transition(RunState.DONE)
        self._gate.release()
        if self.config.show_only_once:
            try:
                self.state_store.set_shown(self.config.tutorial_id, True, user_id)
            except Exception as e:
                logger.error(f"Failed to persist shown flag for '{self.config.tutorial_id}': {e}")

        self._last_outcome = RunOutcome.success()
        self._transition(RunState.IDLE)
        logger.info(f"Tutorial '{self.config.tutorial_id}' dismissed")

    def _fail(self, generation: int, failure: PipelineFailure) -> None:
        if not self._is_live(generation):
            logger.debug(f"Discarding result of invalidated run: {failure}")
            return

        if failure.quiet:
            logger.debug(f"Tutorial run aborted: {failure}")
        else:
            logger.warning(f"Tutorial run failed: {failure}")

        self._last_outcome = RunOutcome.failed(failure.kind, failure.message, self._state)
        self._transition(RunState.FAILED)
        self._gate.release()
        self._transition(RunState.IDLE)

    def _transition(self, new_state: RunState) -> None:
        old_state = self._state
        if old_state == new_state:
            return
        if not can_transition(old_state, new_state):
            logger.error(f"Unexpected state transition {old_state.value} -> {new_state.value}")

        self._state = new_state
        logger.debug(f"State: {old_state.value} -> {new_state.value}")

        if self.on_state_change is not None:
            try:
                self.on_state_change(old_state, new_state)
            except Exception as e:
                logger.error(f"State listener failed: {e}")
