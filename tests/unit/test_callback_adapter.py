"""Tests for the callback-to-result adapter."""

import asyncio
import threading

import pytest

from neo_identity.core.exceptions import AuthenticationError, ProviderError
from neo_identity.infrastructure.adapters import ChallengeResponseAdapter, PendingResult, ResolutionState

from tests.fakes import FakeProviderError


class TestPendingResult:
    """Test single-resolution semantics."""

    @pytest.mark.asyncio
    async def test_first_success_wins(self):
        pending = PendingResult("op")

        assert pending.resolve("first") is True
        assert pending.fail(FakeProviderError("InternalErrorException")) is False
        assert pending.resolve("second") is False

        assert await pending == "first"
        assert pending.state == ResolutionState.RESOLVED

    @pytest.mark.asyncio
    async def test_first_failure_wins(self):
        pending = PendingResult("op")

        pending.fail(FakeProviderError("InternalErrorException"))
        pending.resolve("late")

        with pytest.raises(ProviderError) as exc_info:
            await pending
        assert exc_info.value.provider_code == "InternalErrorException"
        assert exc_info.value.operation == "op"

    @pytest.mark.asyncio
    async def test_resolution_from_worker_thread(self):
        pending = PendingResult("op")

        worker = threading.Thread(target=pending.resolve, args=("from-thread",))
        worker.start()

        assert await asyncio.wait_for(pending, timeout=2) == "from-thread"
        worker.join()

    @pytest.mark.asyncio
    async def test_racing_threads_resolve_once(self):
        pending = PendingResult("op")
        outcomes = []

        def deliver(value):
            outcomes.append(pending.resolve(value))

        workers = [threading.Thread(target=deliver, args=(i,)) for i in range(8)]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()

        value = await asyncio.wait_for(pending, timeout=2)
        assert outcomes.count(True) == 1
        assert value in range(8)

    @pytest.mark.asyncio
    async def test_late_callback_after_cancelled_wait(self):
        pending = PendingResult("op")

        async def wait():
            return await pending

        waiter = asyncio.ensure_future(wait())
        await asyncio.sleep(0)
        waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiter

        worker = threading.Thread(target=pending.resolve, args=("late",))
        worker.start()
        worker.join()
        await asyncio.sleep(0)

        assert pending.is_resolved

    @pytest.mark.asyncio
    async def test_failing_transform_fails_result(self):
        pending = PendingResult("op")

        pending.resolve_with(lambda payload: payload["Missing"], ({},))

        with pytest.raises(ProviderError) as exc_info:
            await pending
        assert exc_info.value.provider_code == "KeyError"

    @pytest.mark.asyncio
    async def test_node_callback_error_is_authoritative(self):
        pending = PendingResult("register")

        pending.node_callback()(FakeProviderError("UsernameExistsException"), {"UserSub": "abc"})

        with pytest.raises(ProviderError) as exc_info:
            await pending
        assert exc_info.value.provider_code == "UsernameExistsException"

    @pytest.mark.asyncio
    async def test_failure_without_error_object(self):
        pending = PendingResult("op")
        pending.fail(None)

        with pytest.raises(ProviderError):
            await pending


class TestChallengeResponseAdapter:
    """Test adapter call shapes."""

    @pytest.fixture
    def adapter(self):
        return ChallengeResponseAdapter()

    @pytest.mark.asyncio
    async def test_call_node_success_with_transform(self, adapter):
        def method(value, callback):
            callback(None, value * 2)

        assert await adapter.call_node("op", method, 21, transform=str) == "42"

    @pytest.mark.asyncio
    async def test_call_node_double_callback(self, adapter):
        def method(callback):
            callback(None, "ok")
            callback(FakeProviderError("InternalErrorException"))

        assert await adapter.call_node("op", method) == "ok"

    @pytest.mark.asyncio
    async def test_synchronous_exception_fails_result(self, adapter):
        def method(callback):
            raise ValueError("broken")

        with pytest.raises(ProviderError) as exc_info:
            await adapter.call_node("op", method)
        assert isinstance(exc_info.value.__cause__, ValueError)

    @pytest.mark.asyncio
    async def test_call_callbacks_failure(self, adapter):
        def method(callbacks):
            callbacks.on_failure(FakeProviderError("ResourceNotFoundException"))
            callbacks.on_success("late")

        with pytest.raises(ProviderError) as exc_info:
            await adapter.call_callbacks("get_device", method)
        assert exc_info.value.provider_code == "ResourceNotFoundException"

    @pytest.mark.asyncio
    async def test_call_completion_always_resolves(self, adapter):
        def broken(callback):
            raise RuntimeError("network down")

        def fine(callback):
            callback()

        assert await adapter.call_completion("sign_out", broken) is None
        assert await adapter.call_completion("sign_out", fine) is None

    @pytest.mark.asyncio
    async def test_call_interactive_resolves_once_with_prompt(self, adapter):
        prompts = []
        payload = {"CodeDeliveryDetails": {"Destination": "u***@a***.io"}}

        def method(callbacks):
            callbacks.input_verification_code(payload)
            callbacks.on_success("ignored")

        result = await adapter.call_interactive(
            "forgot_password",
            method,
            prompt_handler=prompts.append,
            transform=lambda data: data["CodeDeliveryDetails"]["Destination"],
        )

        assert result == "u***@a***.io"
        assert prompts == [payload]

    @pytest.mark.asyncio
    async def test_call_interactive_handler_error_surfaces_unchanged(self, adapter):
        def method(callbacks):
            callbacks.input_verification_code({})

        def handler(payload):
            raise LookupError("no code source")

        with pytest.raises(LookupError):
            await adapter.call_interactive("forgot_password", method, prompt_handler=handler)

    @pytest.mark.asyncio
    async def test_call_interactive_without_handler_uses_on_success(self, adapter):
        def method(callbacks):
            assert callbacks.input_verification_code is None
            callbacks.on_success({"CodeDeliveryDetails": {}})

        assert await adapter.call_interactive("forgot_password", method) == {"CodeDeliveryDetails": {}}

    @pytest.mark.asyncio
    async def test_call_authentication_challenge(self, adapter):
        def method(credentials, callbacks):
            callbacks.totp_required("SOFTWARE_TOKEN_MFA", None, "session-1")

        result = await adapter.call_authentication(
            "authenticate",
            method,
            "credentials",
            stage="primary",
            transform=lambda session: "tokens",
            challenge_transform=lambda name, params, session: (name, params, session),
        )
        assert result == ("SOFTWARE_TOKEN_MFA", {}, "session-1")

    @pytest.mark.asyncio
    async def test_call_authentication_rejection(self, adapter):
        def method(credentials, callbacks):
            callbacks.on_failure(FakeProviderError("CodeMismatchException"))

        with pytest.raises(AuthenticationError) as exc_info:
            await adapter.call_authentication(
                "respond_to_mfa_challenge",
                method,
                "credentials",
                stage="mfa",
                transform=lambda session: session,
                challenge_transform=lambda *args: args,
            )
        assert exc_info.value.stage == "mfa"
