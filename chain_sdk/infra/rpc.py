"""
Async JSON-RPC client for Solana-compatible chains

Provides unified JSON-RPC interface with:
- Multiple endpoint fallback
- Retry logic for transaction sends (reads are single-shot)
- Rate limit handling
- Request timeout management
"""

from __future__ import annotations

import asyncio
import base64
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

import httpx

from ..errors import ErrorCode, RpcError, ConfigurationError
from ..config import get_config

logger = logging.getLogger(__name__)


@dataclass
class RpcClientConfig:
    """
    RPC client runtime configuration

    Allows per-client overrides while pulling defaults from the global
    config (chain_sdk.config.RpcConfig).

    Usage:
        # Use all defaults from environment
        client = RpcClient(endpoint)

        # Override specific settings
        config = RpcClientConfig(timeout_seconds=60, max_retries=5)
        client = RpcClient(endpoint, config=config)
    """
    timeout_seconds: float = None
    max_retries: int = None
    retry_delay_seconds: float = None
    commitment: str = None

    def __post_init__(self):
        """Apply defaults from global config for any unset values"""
        settings = get_config().rpc
        if self.timeout_seconds is None:
            self.timeout_seconds = settings.timeout_seconds
        if self.max_retries is None:
            self.max_retries = settings.max_retries
        if self.retry_delay_seconds is None:
            self.retry_delay_seconds = settings.retry_delay_seconds
        if self.commitment is None:
            self.commitment = settings.commitment


class RpcClient:
    """
    Async JSON-RPC client

    Every SDK suspension point that touches the network goes through here:
    blockhash, rent, account lookups, send, simulate, status polling.

    Usage:
        async with RpcClient("https://rpc.gorbchain.xyz") as rpc:
            blockhash = await rpc.get_latest_blockhash()

        # Multiple endpoints with fallback
        rpc = RpcClient([
            "https://primary-rpc.example.com",
            "https://backup-rpc.example.com",
        ])
    """

    def __init__(
        self,
        endpoint: Union[str, List[str]],
        config: Optional[RpcClientConfig] = None,
    ):
        """
        Initialize RPC client

        Args:
            endpoint: RPC endpoint URL or list of URLs (for fallback)
            config: RPC configuration options
        """
        self._endpoints = [endpoint] if isinstance(endpoint, str) else list(endpoint)
        self._endpoints = [e for e in self._endpoints if e]
        if not self._endpoints:
            raise ConfigurationError.missing("RPC endpoint")

        self._config = config or RpcClientConfig()
        self._current_endpoint_idx = 0
        self._client: Optional[httpx.AsyncClient] = None
        self._request_id = 0

    @property
    def endpoint(self) -> str:
        """Current active endpoint"""
        return self._endpoints[self._current_endpoint_idx]

    @property
    def commitment(self) -> str:
        """Default commitment level"""
        return self._config.commitment

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._config.timeout_seconds,
                headers={"Content-Type": "application/json"},
            )
        return self._client

    def _rotate_endpoint(self):
        """Rotate to next endpoint on failure"""
        if len(self._endpoints) > 1:
            self._current_endpoint_idx = (self._current_endpoint_idx + 1) % len(self._endpoints)
            logger.info(f"Rotating to RPC endpoint: {self.endpoint}")

    async def call(
        self,
        method: str,
        params: List[Any],
        timeout: Optional[float] = None,
        retry: bool = False,
    ) -> Any:
        """
        Make JSON-RPC call

        Calls are single-shot unless retry is set: a failed attempt raises
        and moves the client to the next endpoint for later calls. With
        retry, transport failures are retried max_retries times per endpoint
        across all endpoints. A JSON-RPC error answer is always raised
        immediately.

        Args:
            method: RPC method name
            params: RPC parameters
            timeout: Optional timeout override
            retry: Retry transport failures and rotate endpoints

        Returns:
            RPC result

        Raises:
            RpcError: On RPC failure
        """
        client = self._get_client()
        self._request_id += 1
        body = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params,
        }
        timeout_val = timeout or self._config.timeout_seconds
        max_attempts = self._config.max_retries if retry else 1
        max_endpoints = len(self._endpoints) if retry else 1

        last_error: Optional[Exception] = None
        endpoints_tried = 0

        while endpoints_tried < max_endpoints:
            for attempt in range(max_attempts):
                try:
                    response = await client.post(
                        self.endpoint,
                        json=body,
                        timeout=timeout_val,
                    )

                    if response.status_code == 429:
                        logger.warning(f"Rate limited by {self.endpoint}")
                        last_error = RpcError.rate_limited(self.endpoint)
                        if attempt < max_attempts - 1:
                            await asyncio.sleep(self._config.retry_delay_seconds * (attempt + 1))
                        continue

                    response.raise_for_status()
                    result = response.json()

                    if not isinstance(result, dict):
                        raise RpcError(
                            f"Invalid JSON-RPC response for {method}: {result!r}",
                            code=ErrorCode.RPC_INVALID_RESPONSE,
                            endpoint=self.endpoint,
                        )

                    if "error" in result:
                        error = result["error"]
                        if isinstance(error, dict):
                            error_msg = error.get("message", str(error))
                        else:
                            error_msg = str(error)
                            error = {}
                        rpc_error = RpcError(
                            f"RPC error: {error_msg}",
                            code=ErrorCode.RPC_INVALID_RESPONSE,
                            endpoint=self.endpoint,
                        )
                        # Preserve RPC error code in details for debugging
                        rpc_error.details["rpc_error_code"] = error.get("code")
                        rpc_error.details["rpc_error_data"] = error.get("data")
                        raise rpc_error

                    return result.get("result")

                except httpx.TimeoutException:
                    last_error = RpcError.timeout(self.endpoint, timeout_val)
                    logger.warning(f"RPC timeout (attempt {attempt + 1}): {self.endpoint}")

                except httpx.HTTPStatusError as e:
                    last_error = RpcError(
                        f"HTTP error {e.response.status_code}",
                        endpoint=self.endpoint,
                        original_error=e,
                    )
                    logger.warning(f"RPC HTTP error (attempt {attempt + 1}): {e}")

                except httpx.RequestError as e:
                    last_error = RpcError.connection_failed(self.endpoint, e)
                    logger.warning(f"RPC connection error (attempt {attempt + 1}): {e}")

                except RpcError:
                    raise

                except ValueError as e:
                    last_error = RpcError(
                        f"Invalid JSON response: {e}",
                        code=ErrorCode.RPC_INVALID_RESPONSE,
                        endpoint=self.endpoint,
                        original_error=e,
                    )
                    logger.warning(f"RPC invalid response (attempt {attempt + 1}): {e}")

                except Exception as e:
                    last_error = RpcError(
                        f"Unexpected error: {e}",
                        endpoint=self.endpoint,
                        original_error=e,
                    )
                    logger.warning(f"RPC unexpected error (attempt {attempt + 1}): {e}")

                if attempt < max_attempts - 1:
                    await asyncio.sleep(self._config.retry_delay_seconds * (attempt + 1))

            self._rotate_endpoint()
            endpoints_tried += 1

        raise last_error or RpcError("All RPC endpoints failed")

    def _context_value(self, method: str, result: Any) -> Any:
        """Unwrap a {"context", "value"} result"""
        if result is None:
            return None
        if not isinstance(result, dict):
            raise RpcError(
                f"Invalid {method} result: {result!r}",
                code=ErrorCode.RPC_INVALID_RESPONSE,
                endpoint=self.endpoint,
            )
        return result.get("value")

    async def get_latest_blockhash(
        self,
        commitment: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Get latest blockhash

        Returns:
            Dict with blockhash and lastValidBlockHeight
        """
        params = [{"commitment": commitment or self.commitment}]
        result = await self.call("getLatestBlockhash", params)
        value = self._context_value("getLatestBlockhash", result)
        if not isinstance(value, dict) or not value.get("blockhash"):
            raise RpcError(
                "getLatestBlockhash returned no blockhash",
                code=ErrorCode.RPC_INVALID_RESPONSE,
                endpoint=self.endpoint,
            )
        return value

    async def get_minimum_balance_for_rent_exemption(
        self,
        data_length: int,
        commitment: Optional[str] = None,
    ) -> int:
        """Rent-exempt minimum in lamports for an account of data_length bytes"""
        params = [data_length, {"commitment": commitment or self.commitment}]
        result = await self.call("getMinimumBalanceForRentExemption", params)
        if not isinstance(result, int):
            raise RpcError(
                f"Invalid getMinimumBalanceForRentExemption result: {result!r}",
                code=ErrorCode.RPC_INVALID_RESPONSE,
                endpoint=self.endpoint,
            )
        return result

    async def get_account_info(
        self,
        address: str,
        encoding: str = "base64",
        commitment: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Get account information

        Args:
            address: Account address (base58)
            encoding: Data encoding ("base64", "jsonParsed", etc.)
            commitment: Commitment level

        Returns:
            Account info or None if not found
        """
        params = [
            str(address),
            {
                "encoding": encoding,
                "commitment": commitment or self.commitment,
            },
        ]
        result = await self.call("getAccountInfo", params)
        return self._context_value("getAccountInfo", result)

    async def get_balance(
        self,
        address: str,
        commitment: Optional[str] = None,
    ) -> int:
        """Get native balance in lamports"""
        params = [str(address), {"commitment": commitment or self.commitment}]
        result = await self.call("getBalance", params)
        return self._context_value("getBalance", result) or 0

    async def send_transaction(
        self,
        transaction: bytes,
        skip_preflight: bool = False,
        preflight_commitment: Optional[str] = None,
        max_retries: Optional[int] = None,
    ) -> str:
        """
        Send signed transaction

        Args:
            transaction: Signed transaction bytes
            skip_preflight: Skip preflight simulation
            preflight_commitment: Preflight commitment level
            max_retries: Node-side rebroadcast count

        Returns:
            Transaction signature (base58)
        """
        tx_data = base64.b64encode(transaction).decode("ascii")

        params = [
            tx_data,
            {
                "skipPreflight": skip_preflight,
                "preflightCommitment": preflight_commitment or self.commitment,
                "encoding": "base64",
            },
        ]
        if max_retries is not None:
            params[1]["maxRetries"] = max_retries

        return await self.call("sendTransaction", params, retry=True)

    async def simulate_transaction(
        self,
        transaction: bytes,
        commitment: Optional[str] = None,
        sig_verify: bool = False,
    ) -> Dict[str, Any]:
        """
        Simulate transaction execution

        The blockhash is kept as signed so simulation sees exactly what
        would be sent.

        Args:
            transaction: Serialized transaction
            commitment: Commitment level
            sig_verify: Verify signatures during simulation

        Returns:
            Simulation value (err, logs, unitsConsumed)
        """
        tx_data = base64.b64encode(transaction).decode("ascii")

        params = [
            tx_data,
            {
                "commitment": commitment or self.commitment,
                "encoding": "base64",
                "sigVerify": sig_verify,
            },
        ]
        result = await self.call("simulateTransaction", params)
        return self._context_value("simulateTransaction", result) or {}

    async def get_signature_statuses(
        self,
        signatures: List[str],
        search_transaction_history: bool = False,
    ) -> List[Optional[Dict[str, Any]]]:
        """
        Get statuses for signatures

        Returns:
            One entry per signature; None where the node has not seen it
        """
        params: List[Any] = [list(signatures)]
        if search_transaction_history:
            params.append({"searchTransactionHistory": True})
        result = await self.call("getSignatureStatuses", params)
        value = self._context_value("getSignatureStatuses", result)
        if value is None:
            return [None] * len(signatures)
        if not isinstance(value, list):
            raise RpcError(
                f"Invalid getSignatureStatuses value: {value!r}",
                code=ErrorCode.RPC_INVALID_RESPONSE,
                endpoint=self.endpoint,
            )
        return [status if isinstance(status, dict) else None for status in value]

    async def get_transaction(
        self,
        signature: str,
        commitment: Optional[str] = None,
        encoding: str = "json",
    ) -> Optional[Dict[str, Any]]:
        """Fetch a landed transaction (None if unknown)"""
        commitment = commitment or self.commitment
        # getTransaction does not accept "processed"
        if commitment == "processed":
            commitment = "confirmed"
        params = [
            signature,
            {
                "commitment": commitment,
                "encoding": encoding,
                "maxSupportedTransactionVersion": 0,
            },
        ]
        return await self.call("getTransaction", params)

    async def close(self):
        """Close HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
