"""
Module: workflow.machine

Purpose:
    Workflow state machine. Drives a WorkflowSession through the
    transition table and guarantees:

    - At most one collaborator call in flight per session
    - A failed call leaves the session at the step it started from,
      with no partial result committed
    - Results arriving after a reset or back-navigation are discarded

    A remote transition runs in three phases so the UI thread never
    blocks on the network:

        pending = machine.fire("confirm_crop", crop=region)   # UI thread
        result = pending.execute(client)                      # worker
        machine.complete(pending, result)                     # UI thread

    run() composes the three synchronously.

Key Classes:
    - WorkflowMachine: The state machine
    - PendingCall: A collaborator call captured by fire()

Dependencies:
    - workflow.transitions: Transition table

Used By:
    - gui.main_window: Fires transitions from page actions
    - gui.workers: Executes PendingCalls
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, List, Optional

from photosheet.client.config import ClientConfig
from photosheet.client.interface import ProcessingClient
from photosheet.client.models import PrinterInfo
from photosheet.errors import BusyError, CollaboratorError, PhotoSheetError, TransitionError

from .session import WorkflowSession
from .states import DEFAULT_ENHANCE_LEVEL, Step, Variant
from .transitions import Args, Transition, available, back_target, lookup

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingCall:
    """
    A collaborator call waiting to be executed.

    Attributes:
        transition: Table row being executed
        args: Arguments captured when the transition fired (read-only)
        generation: Session generation at fire time
        source: Step to restore if the call fails
    """

    transition: Transition
    args: Args
    generation: int
    source: Step

    @property
    def name(self) -> str:
        return self.transition.name

    @property
    def operation(self) -> str:
        return self.transition.operation or self.transition.name

    def execute(self, client: ProcessingClient) -> Any:
        """
        Perform the collaborator call (safe to run on a worker thread).

        Package errors propagate unchanged; anything else raised by the
        client is wrapped in CollaboratorError.
        """
        try:
            return self.transition.request(client, self.args)
        except PhotoSheetError:
            raise
        except Exception as e:
            raise CollaboratorError(self.operation, str(e) or type(e).__name__) from e


class WorkflowMachine:
    """
    Finite-state machine over (step, variant).

    Attributes:
        config: Limits used by guards (upload size and formats)

    Example:
        >>> machine = WorkflowMachine()
        >>> machine.run(client, "upload", path=Path("me.jpg"))
        >>> machine.run(client, "choose_paper", variant="passport")
        >>> machine.step
        <Step.CROP: 'crop'>
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        enhance_level: float = DEFAULT_ENHANCE_LEVEL,
    ) -> None:
        self.config = config or ClientConfig()
        self.default_enhance_level = enhance_level
        self._generation = 0
        self._session = self._new_session()
        self._in_flight: Optional[PendingCall] = None

    def _new_session(self) -> WorkflowSession:
        return WorkflowSession(generation=self._generation, enhance_level=self.default_enhance_level)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def session(self) -> WorkflowSession:
        return self._session

    @property
    def step(self) -> Step:
        return self._session.step

    @property
    def variant(self) -> Optional[Variant]:
        return self._session.variant

    @property
    def busy(self) -> bool:
        return self._in_flight is not None

    @property
    def in_flight(self) -> Optional[PendingCall]:
        return self._in_flight

    def allowed_transitions(self) -> List[str]:
        """Names of transitions that may fire from the current step."""
        if self.busy:
            return []
        return sorted(available(self._session.step, self._session.variant))

    def can_go_back(self) -> bool:
        session = self._session
        if session.step is Step.PROCESSING:
            return True
        return back_target(session.step, session.variant) is not None

    # ------------------------------------------------------------------
    # Forward transitions
    # ------------------------------------------------------------------

    def fire(self, name: str, **params: Any) -> Optional[PendingCall]:
        """
        Start a transition.

        Local transitions are applied immediately and return None. Remote
        transitions return a PendingCall; the session is marked busy until
        complete() or fail() is called with it.

        Raises:
            BusyError: If a collaborator call is already in flight
            TransitionError: If the transition is not allowed from here
            ValidationError: If the transition's guard rejects the input
        """
        if self._in_flight is not None:
            raise BusyError(
                f"Cannot start {name!r} while {self._in_flight.name!r} is in progress"
            )
        session = self._session
        transition = lookup(name, session.step, session.variant)
        args = transition.capture(session, self.config, params)

        if not transition.is_remote:
            draft = replace(session)
            transition.apply(draft, args, None)
            draft.step = transition.target
            draft.last_error = None
            draft.failed_transition = None
            draft.failed_args = None
            self._session = draft
            logger.info(f"{name}: {transition.source.value} -> {transition.target.value}")
            return None

        return self._dispatch(transition, args)

    def retry(self) -> PendingCall:
        """
        Re-issue the last failed call with the same arguments.

        Raises:
            BusyError: If a call is in flight
            TransitionError: If there is nothing to retry from this step
        """
        if self._in_flight is not None:
            raise BusyError(f"Cannot retry while {self._in_flight.name!r} is in progress")
        session = self._session
        if session.failed_transition is None or session.failed_args is None:
            raise TransitionError("Nothing to retry")
        transition = lookup(session.failed_transition, session.step, session.variant)
        if not transition.is_remote:
            raise TransitionError(f"{transition.name!r} has no call to retry")
        logger.info(f"Retrying {transition.name}")
        return self._dispatch(transition, session.failed_args)

    def _dispatch(self, transition: Transition, args: Args) -> PendingCall:
        session = self._session
        pending = PendingCall(
            transition=transition,
            args=args,
            generation=session.generation,
            source=session.step,
        )
        self._in_flight = pending
        session.pending = transition.name
        session.resume_step = session.step
        if transition.via_processing:
            session.step = Step.PROCESSING
        logger.info(f"{transition.name}: calling {pending.operation} (generation {pending.generation})")
        return pending

    def _is_current(self, pending: PendingCall, outcome: str) -> bool:
        if pending is self._in_flight and pending.generation == self._session.generation:
            return True
        logger.warning(
            f"Discarding stale {outcome} for {pending.name!r} "
            f"(generation {pending.generation}, current {self._session.generation})"
        )
        return False

    def complete(self, pending: PendingCall, result: Any) -> bool:
        """
        Commit a successful call.

        Returns:
            False if the call was superseded (reset/back) and its result
            discarded, True if it was applied

        Raises:
            CollaboratorError: If the result cannot be applied; the session
                is then treated as if the call had failed
        """
        if not self._is_current(pending, "result"):
            return False

        transition = pending.transition
        draft = replace(self._session)
        try:
            transition.apply(draft, pending.args, result)
        except (ValueError, TypeError, AttributeError, PhotoSheetError) as e:
            error = CollaboratorError(pending.operation, f"Unusable response: {e}")
            self.fail(pending, error)
            raise error from e

        draft.step = transition.target
        draft.pending = None
        draft.resume_step = None
        draft.last_error = None
        draft.failed_transition = None
        draft.failed_args = None
        self._session = draft
        self._in_flight = None
        logger.info(f"{transition.name}: {pending.source.value} -> {transition.target.value}")
        return True

    def fail(self, pending: PendingCall, error: Exception) -> bool:
        """
        Record a failed call and return to the step it started from.

        Returns:
            False if the call was superseded and the failure ignored
        """
        if not self._is_current(pending, "failure"):
            return False
        session = self._session
        session.step = pending.source
        session.pending = None
        session.resume_step = None
        session.last_error = error
        session.failed_transition = pending.name
        session.failed_args = pending.args
        self._in_flight = None
        logger.error(f"{pending.name} failed: {error}")
        return True

    def run(self, client: ProcessingClient, name: str, **params: Any) -> WorkflowSession:
        """
        Fire a transition and, if it is remote, execute and settle it
        synchronously.

        Raises:
            Whatever fire() raises, or the call's CollaboratorError /
            PrintEnvironmentError after the session has been restored
        """
        pending = self.fire(name, **params)
        if pending is None:
            return self._session
        try:
            result = pending.execute(client)
        except PhotoSheetError as e:
            self.fail(pending, e)
            raise
        self.complete(pending, result)
        return self._session

    # ------------------------------------------------------------------
    # Back / reset
    # ------------------------------------------------------------------

    def back(self) -> Step:
        """
        Return to the previous data-bearing step.

        From PROCESSING this abandons the in-flight call and returns to
        the step it started from. Any in-flight result is discarded.

        Raises:
            TransitionError: If there is no previous step
        """
        session = self._session
        if session.step is Step.PROCESSING and session.resume_step is not None:
            target = session.resume_step
        else:
            target = back_target(session.step, session.variant)
        if target is None:
            raise TransitionError(f"Cannot go back from {session.step.value}")

        self._generation += 1
        self._in_flight = None
        session.generation = self._generation
        session.pending = None
        session.resume_step = None
        session.last_error = None
        session.failed_transition = None
        session.failed_args = None
        previous = session.step
        session.step = target
        logger.info(f"back: {previous.value} -> {target.value} (generation {self._generation})")
        return target

    def reset(self) -> WorkflowSession:
        """
        Discard the session and start over at UPLOAD (retake).

        Allowed from any step, including while a call is in flight.
        """
        previous = self._session.step
        self._generation += 1
        self._in_flight = None
        self._session = self._new_session()
        logger.info(f"reset: {previous.value} -> upload (generation {self._generation})")
        return self._session


def fetch_printers(client: ProcessingClient) -> List[PrinterInfo]:
    """
    Printers offered by the collaborator.

    Listing printers is optional: a failure is logged and an empty list
    returned so that downloading stays available.
    """
    try:
        printers = client.list_printers()
    except CollaboratorError as e:
        logger.warning(f"Printer listing unavailable: {e}")
        return []
    logger.info(f"Found {len(printers)} printer(s)")
    return printers
