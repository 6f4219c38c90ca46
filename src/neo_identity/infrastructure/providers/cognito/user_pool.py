"""Cognito user pool binding over boto3."""

import base64
import hashlib
import hmac
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional

import boto3

from ....core.protocols import NodeCallback
from ....core.value_objects import PoolConfig, UserAttribute
from .session_storage import MemorySessionStorage, SessionStorage
from .user import CognitoUser

logger = logging.getLogger(__name__)

DEFAULT_DEVICE_NAME = "neo-identity-gateway"


class CognitoUserPool:
    """User pool implementing the callback-style provider contract.

    boto3 clients are blocking, so every provider call runs on a worker
    thread and reports through the callbacks from that thread.
    """

    def __init__(
        self,
        pool_config: PoolConfig,
        *,
        client: Any = None,
        storage: Optional[SessionStorage] = None,
        executor: Optional[ThreadPoolExecutor] = None,
        max_workers: int = 8,
        device_name: str = DEFAULT_DEVICE_NAME,
    ):
        """Initialize the user pool binding.

        Args:
            pool_config: Pool and app client identifiers
            client: boto3 ``cognito-idp`` client; created from the pool
                config when omitted
            storage: Session token storage (defaults to in-memory)
            executor: Worker pool for blocking provider calls
            max_workers: Worker count when no executor is given
            device_name: Name recorded when confirming a new device
        """
        self._config = pool_config
        self._client = client if client is not None else self._create_client(pool_config)
        self._storage = storage if storage is not None else MemorySessionStorage()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="cognito"
        )
        self._device_name = device_name

    @staticmethod
    def _create_client(pool_config: PoolConfig) -> Any:
        kwargs: Dict[str, Any] = {"service_name": "cognito-idp"}
        if pool_config.region:
            kwargs["region_name"] = pool_config.region
        if pool_config.endpoint_url:
            kwargs["endpoint_url"] = pool_config.endpoint_url
        return boto3.client(**kwargs)

    @property
    def pool_config(self) -> PoolConfig:
        return self._config

    @property
    def user_pool_id(self) -> str:
        return self._config.user_pool_id

    @property
    def client_id(self) -> str:
        return self._config.client_id

    @property
    def client(self) -> Any:
        return self._client

    @property
    def storage(self) -> SessionStorage:
        return self._storage

    @property
    def device_name(self) -> str:
        return self._device_name

    def secret_hash(self, username: str) -> Optional[str]:
        """Compute SECRET_HASH for clients configured with a secret."""
        if not self._config.client_secret:
            return None
        digest = hmac.new(
            self._config.client_secret.encode("utf-8"),
            (username + self._config.client_id).encode("utf-8"),
            hashlib.sha256,
        ).digest()
        return base64.b64encode(digest).decode("ascii")

    def dispatch(
        self,
        operation: str,
        call: Callable[[], Any],
        on_success: Callable[[Any], None],
        on_failure: Callable[[Exception], None],
    ) -> None:
        """Run a blocking provider call on a worker thread.

        Callbacks are invoked from the worker thread. Errors raised while
        handling a result are reported to ``on_failure`` as well.
        """

        def run() -> None:
            try:
                result = call()
            except Exception as e:
                logger.debug(f"Cognito {operation} failed: {type(e).__name__}")
                on_failure(e)
                return
            try:
                on_success(result)
            except Exception as e:
                logger.exception(f"Cognito {operation} result handling failed")
                on_failure(e)

        self._executor.submit(run)

    def sign_up(
        self,
        username: str,
        password: str,
        user_attributes: List[UserAttribute],
        validation_data: Optional[List[UserAttribute]],
        callback: NodeCallback,
    ) -> None:
        params: Dict[str, Any] = {
            "ClientId": self.client_id,
            "Username": username,
            "Password": password,
            "UserAttributes": [attribute.to_provider() for attribute in user_attributes],
        }
        if validation_data:
            params["ValidationData"] = [attribute.to_provider() for attribute in validation_data]
        secret_hash = self.secret_hash(username)
        if secret_hash:
            params["SecretHash"] = secret_hash

        self.dispatch(
            "sign_up",
            lambda: self._client.sign_up(**params),
            lambda response: callback(None, response),
            callback,
        )

    def user(self, username: str) -> CognitoUser:
        """Create a fresh user handle."""
        return CognitoUser(self, username)

    def shutdown(self, wait: bool = True) -> None:
        """Stop the worker pool if this binding created it."""
        if self._owns_executor:
            self._executor.shutdown(wait=wait)
