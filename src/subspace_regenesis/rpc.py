from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple
import httpx

from .errors import RpcError


def to_http_url(url: str) -> str:
    """Substrate nodes answer plain HTTP JSON-RPC on their websocket port."""
    if url.startswith("ws://"):
        return "http://" + url[len("ws://"):]
    if url.startswith("wss://"):
        return "https://" + url[len("wss://"):]
    return url


def to_hex(data: bytes) -> str:
    return "0x" + data.hex()


def from_hex(value: str) -> bytes:
    if value.startswith("0x"):
        value = value[2:]
    return bytes.fromhex(value)


class RpcClient:
    def __init__(
        self,
        node_url: str,
        timeout_s: float = 60.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.node_url = to_http_url(node_url)
        self.client = client or httpx.Client(timeout=timeout_s)
        self._next_id = 1

    def close(self) -> None:
        self.client.close()

    def _call(self, method: str, params: List[Any]) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": self._next_id,
            "method": method,
            "params": params,
        }
        self._next_id += 1
        resp = self.client.post(self.node_url, json=payload)
        resp.raise_for_status()
        try:
            data = resp.json()
        except ValueError as e:
            raise RpcError(f"Non-JSON response to {method}: {resp.text[:200]!r}") from e
        if not isinstance(data, dict):
            raise RpcError(f"Unexpected response to {method}: {data!r}")
        if "error" in data:
            raise RpcError(f"RPC error from {method}: {data['error']}")
        return data.get("result")

    def get_block_hash(self, block_number: Optional[int] = None) -> Optional[str]:
        """Canonical hash for a block number, or the best block hash when omitted."""
        params: List[Any] = [] if block_number is None else [block_number]
        return self._call("chain_getBlockHash", params)

    def get_header(self, block_hash: str) -> Optional[Dict[str, Any]]:
        return self._call("chain_getHeader", [block_hash])

    def get_keys_paged(
        self,
        prefix: bytes,
        count: int,
        start_key: Optional[str],
        block_hash: str,
    ) -> List[str]:
        return self._call(
            "state_getKeysPaged", [to_hex(prefix), count, start_key, block_hash]
        ) or []

    def query_storage_at(
        self, keys: List[str], block_hash: str
    ) -> List[Tuple[str, Optional[str]]]:
        """
        Returns (key, value) hex pairs for the given keys at one block.
        The node answers [{"block": ..., "changes": [[key, value|null], ...]}].
        """
        result = self._call("state_queryStorageAt", [keys, block_hash]) or []
        out: List[Tuple[str, Optional[str]]] = []
        for change_set in result:
            for key, value in change_set.get("changes", []):
                out.append((key, value))
        return out

    def get_storage(self, key: bytes, block_hash: str) -> Optional[str]:
        return self._call("state_getStorage", [to_hex(key), block_hash])
