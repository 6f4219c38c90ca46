"""Callback-to-result adapter for the identity provider.

Every provider call reports completion through callbacks, possibly from a
worker thread, possibly more than once in edge cases. This module turns each
call into exactly one awaited outcome: a value, or one classified exception.
"""

import asyncio
import logging
import threading
from enum import Enum
from typing import Any, Callable, Optional

from ...core.protocols import NodeCallback, ProviderCallbacks
from .error_classifier import classify_provider_error

logger = logging.getLogger(__name__)


class ResolutionState(str, Enum):
    """Resolution state of a pending provider call."""
    PENDING = "pending"
    RESOLVED = "resolved"


class PendingResult:
    """Single-resolution result of one provider interaction.

    The first outcome (success or failure) wins; anything delivered after it
    is dropped. Callbacks may fire on any thread: the outcome is marshalled
    onto the event loop that created the result. If the awaiting caller has
    gone away (cancelled), a late outcome is still accepted and discarded.
    """

    def __init__(
        self,
        operation: str,
        *,
        authentication_stage: Optional[str] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self.operation = operation
        self.authentication_stage = authentication_stage
        self._loop = loop or asyncio.get_running_loop()
        self._future: asyncio.Future = self._loop.create_future()
        self._lock = threading.Lock()
        self._state = ResolutionState.PENDING

    @property
    def state(self) -> ResolutionState:
        return self._state

    @property
    def is_resolved(self) -> bool:
        return self._state == ResolutionState.RESOLVED

    def resolve(self, value: Any = None) -> bool:
        """Resolve with a success value. Returns False if already resolved."""
        return self._settle(value, None)

    def fail(self, error: Any, *, classify: bool = True) -> bool:
        """Fail with an error. Returns False if already resolved.

        Args:
            error: Provider error of any shape
            classify: Normalise into the gateway taxonomy; caller-supplied
                hooks pass False so their own exceptions surface unchanged
        """
        if error is None:
            error = RuntimeError("Provider reported failure without an error")
        return self._settle(None, error, classify=classify)

    def _settle(self, value: Any, error: Any, classify: bool = True) -> bool:
        with self._lock:
            if self._state == ResolutionState.RESOLVED:
                outcome = "failure" if error is not None else "success"
                logger.debug(f"Ignoring late {outcome} callback for {self.operation}")
                return False
            self._state = ResolutionState.RESOLVED

        if error is not None and classify:
            error = classify_provider_error(
                error, self.operation, authentication_stage=self.authentication_stage
            )
        elif error is not None and not isinstance(error, BaseException):
            error = RuntimeError(str(error))

        if self._on_loop_thread():
            self._apply(value, error)
        else:
            try:
                self._loop.call_soon_threadsafe(self._apply, value, error)
            except RuntimeError:
                logger.warning(f"Event loop closed before {self.operation} completed")
        return True

    def _on_loop_thread(self) -> bool:
        try:
            return asyncio.get_running_loop() is self._loop
        except RuntimeError:
            return False

    def _apply(self, value: Any, error: Optional[BaseException]) -> None:
        if self._future.done():
            logger.debug(f"Result of {self.operation} arrived after caller stopped waiting")
            return
        if error is not None:
            self._future.set_exception(error)
        else:
            self._future.set_result(value)

    def resolve_with(self, transform: Optional[Callable[..., Any]], results: tuple) -> None:
        """Resolve with ``transform(*results)``; a failing transform fails the result."""
        if transform is None:
            self.resolve(results[0] if results else None)
            return
        try:
            value = transform(*results)
        except Exception as e:
            logger.error(f"Malformed provider response for {self.operation}: {e}")
            self.fail(e)
            return
        self.resolve(value)

    def node_callback(self, transform: Optional[Callable[..., Any]] = None) -> NodeCallback:
        """Build a ``callback(error, *results)``; the error is authoritative."""
        def callback(error: Any = None, *results: Any) -> None:
            if error is not None:
                self.fail(error)
                return
            self.resolve_with(transform, results)
        return callback

    def callbacks(
        self,
        transform: Optional[Callable[..., Any]] = None,
        **hooks: Any,
    ) -> ProviderCallbacks:
        """Build an ``on_success`` / ``on_failure`` bundle plus optional hooks."""
        return ProviderCallbacks(
            on_success=lambda *results: self.resolve_with(transform, results),
            on_failure=self.fail,
            **hooks,
        )

    def completion_callback(self, value: Any = None) -> Callable[..., None]:
        """Build a callback that always resolves with ``value``."""
        return lambda *_: self.resolve(value)

    def invoke(self, method: Callable[..., Any], *args: Any) -> "PendingResult":
        """Call a provider method; a synchronous exception fails the result."""
        try:
            method(*args)
        except Exception as e:
            logger.error(f"Provider call for {self.operation} raised synchronously: {e}")
            self.fail(e)
        return self

    def __await__(self):
        return self._future.__await__()


class ChallengeResponseAdapter:
    """Adapter issuing provider calls and awaiting their single outcome.

    Handles ONLY callback multiplexing and error normalisation.
    Does not validate input, build handles or sequence multi-step flows.
    """

    async def call_node(
        self,
        operation: str,
        method: Callable[..., Any],
        *args: Any,
        transform: Optional[Callable[..., Any]] = None,
        authentication_stage: Optional[str] = None,
    ) -> Any:
        """Call a provider method taking a node-style callback as last argument."""
        logger.debug(f"Dispatching {operation}")
        pending = PendingResult(operation, authentication_stage=authentication_stage)
        pending.invoke(method, *args, pending.node_callback(transform))
        return await pending

    async def call_callbacks(
        self,
        operation: str,
        method: Callable[..., Any],
        *args: Any,
        transform: Optional[Callable[..., Any]] = None,
        authentication_stage: Optional[str] = None,
    ) -> Any:
        """Call a provider method taking a ProviderCallbacks bundle as last argument."""
        logger.debug(f"Dispatching {operation}")
        pending = PendingResult(operation, authentication_stage=authentication_stage)
        pending.invoke(method, *args, pending.callbacks(transform))
        return await pending

    async def call_completion(
        self,
        operation: str,
        method: Callable[..., Any],
        *args: Any,
    ) -> None:
        """Call a provider method with a completion-only callback.

        Such operations have no failure path: a synchronous error is logged
        and the call still resolves.
        """
        logger.debug(f"Dispatching {operation}")
        pending = PendingResult(operation)
        try:
            method(*args, pending.completion_callback())
        except Exception as e:
            logger.warning(f"{operation} raised, resolving anyway: {e}")
            pending.resolve(None)
        await pending

    async def call_interactive(
        self,
        operation: str,
        method: Callable[..., Any],
        *args: Any,
        prompt_handler: Optional[Callable[[Any], Any]] = None,
        transform: Optional[Callable[..., Any]] = None,
    ) -> Any:
        """Call a provider method that may prompt for a verification code.

        When ``prompt_handler`` is given, the provider's prompt payload is
        passed to it synchronously, on the thread the provider uses, before
        the provider continues; the call then resolves with the (transformed)
        prompt payload. Acquiring the code from the user is left to the
        handler's owner. Without a handler the provider reports through
        ``on_success`` as usual.
        """
        logger.debug(f"Dispatching {operation}")
        pending = PendingResult(operation)
        hooks = {}

        if prompt_handler is not None:
            def on_prompt(payload: Any) -> None:
                if pending.is_resolved:
                    logger.debug(f"Ignoring prompt for already resolved {operation}")
                    return
                try:
                    prompt_handler(payload)
                except Exception as e:
                    pending.fail(e, classify=False)
                    return
                pending.resolve_with(transform, (payload,))

            hooks["input_verification_code"] = on_prompt

        pending.invoke(method, *args, pending.callbacks(transform, **hooks))
        return await pending

    async def call_authentication(
        self,
        operation: str,
        method: Callable[..., Any],
        *args: Any,
        stage: str,
        transform: Callable[..., Any],
        challenge_transform: Callable[[str, dict, Optional[str]], Any],
    ) -> Any:
        """Issue an authentication challenge step.

        Resolves with ``transform(session)`` on success, or with
        ``challenge_transform(name, parameters, session)`` when the provider
        asks for a secondary factor. Rejections become AuthenticationError.
        """
        logger.debug(f"Dispatching {operation} ({stage} challenge)")
        pending = PendingResult(operation, authentication_stage=stage)

        def on_challenge(challenge_name: str, parameters: Optional[dict] = None, session: Optional[str] = None) -> None:
            pending.resolve_with(challenge_transform, (challenge_name, parameters or {}, session))

        pending.invoke(
            method,
            *args,
            pending.callbacks(transform, mfa_required=on_challenge, totp_required=on_challenge),
        )
        return await pending
