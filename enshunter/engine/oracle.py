"""Availability oracle: protocol plus the ENS registrar JSON-RPC client."""

from __future__ import annotations

import itertools
from typing import Any, Protocol

import httpx
import structlog

from ..config.models import DEFAULT_SUFFIX
from ..errors import DeadlineExceeded, OracleError
from .deadline import DeadlineGovernor
from .identifiers import strip_suffix

INFURA_URL_TEMPLATE = "https://mainnet.infura.io/v3/{key}"
REGISTRAR_CONTROLLER = "0x283Af0B28c62C092C9727F1Ee09c02CA627EB7F5"
# keccak256("available(string)")[:4]
AVAILABLE_SELECTOR = bytes.fromhex("aeb8ce9b")
_WORD = 32


class Oracle(Protocol):
    """Read-only endpoint answering one availability query at a time."""

    def available(self, identifier: str, deadline: DeadlineGovernor) -> bool:
        """Return whether ``identifier`` can be registered.

        Implementations must raise :class:`OracleError` on failure and must
        not outlive ``deadline``.
        """


def encode_available_call(label: str) -> str:
    """ABI-encode ``available(string)`` call data for ``label``."""

    data = label.encode("utf-8")
    padded = data.ljust((len(data) + _WORD - 1) // _WORD * _WORD, b"\0")
    payload = (
        AVAILABLE_SELECTOR
        + _WORD.to_bytes(_WORD, "big")
        + len(data).to_bytes(_WORD, "big")
        + padded
    )
    return "0x" + payload.hex()


def decode_bool(result: Any) -> bool:
    """Decode a single ABI ``bool`` return word."""

    if not isinstance(result, str) or not result.startswith("0x"):
        raise OracleError(f"Malformed eth_call result: {result!r}")
    body = result[2:]
    if len(body) != _WORD * 2:
        raise OracleError(f"Unexpected eth_call result length: {len(body) // 2} bytes")
    try:
        value = int(body, 16)
    except ValueError as exc:
        raise OracleError(f"Malformed eth_call result: {result!r}") from exc
    if value not in (0, 1):
        raise OracleError(f"eth_call result is not a bool: {result!r}")
    return value == 1


class JsonRpcOracle:
    """Query the ENS registrar controller through an Ethereum JSON-RPC node."""

    def __init__(
        self,
        endpoint: str,
        *,
        contract: str = REGISTRAR_CONTROLLER,
        suffix: str = DEFAULT_SUFFIX,
        request_timeout: float = 15.0,
        client: httpx.Client | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.contract = contract
        self.suffix = suffix
        self.request_timeout = request_timeout
        self._client = client or httpx.Client(timeout=request_timeout)
        self._ids = itertools.count(1)
        self.logger = logger or structlog.get_logger("enshunter.oracle")

    @classmethod
    def for_infura(cls, project_id: str, **kwargs: Any) -> "JsonRpcOracle":
        return cls(INFURA_URL_TEMPLATE.format(key=project_id), **kwargs)

    def close(self) -> None:
        self._client.close()

    def connect(self) -> int:
        """Verify the node answers; return its chain id."""

        try:
            chain_id = self._rpc("eth_chainId", [], timeout=self.request_timeout)
            return int(chain_id, 16)
        except (OracleError, TypeError, ValueError) as exc:
            raise OracleError(f"Failed to connect to Ethereum node: {exc}") from exc

    def available(self, identifier: str, deadline: DeadlineGovernor) -> bool:
        timeout = deadline.bound(self.request_timeout, identifier)
        call = {
            "to": self.contract,
            "data": encode_available_call(strip_suffix(identifier, self.suffix)),
        }
        try:
            result = self._rpc("eth_call", [call, "latest"], timeout=timeout)
        except OracleError as exc:
            if deadline.expired and not isinstance(exc, DeadlineExceeded):
                raise DeadlineExceeded(
                    "context deadline exceeded", identifier=identifier
                ) from exc
            exc.identifier = identifier
            raise
        return decode_bool(result)

    # ------------------------------------------------------------------
    def _rpc(self, method: str, params: list[Any], *, timeout: float) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        try:
            response = self._client.post(self.endpoint, json=payload, timeout=timeout)
            response.raise_for_status()
            body = response.json()
        except httpx.TimeoutException as exc:
            raise OracleError(f"{method} timed out after {timeout:.2f}s") from exc
        except httpx.HTTPError as exc:
            raise OracleError(f"{method} transport error: {exc}") from exc
        except ValueError as exc:
            raise OracleError(f"{method} returned invalid JSON") from exc
        if not isinstance(body, dict):
            raise OracleError(f"{method} returned unexpected payload")
        error = body.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else error
            raise OracleError(f"{method} failed: {message}")
        if "result" not in body:
            raise OracleError(f"{method} response missing result")
        return body["result"]


__all__ = [
    "AVAILABLE_SELECTOR",
    "INFURA_URL_TEMPLATE",
    "JsonRpcOracle",
    "Oracle",
    "REGISTRAR_CONTROLLER",
    "decode_bool",
    "encode_available_call",
]
