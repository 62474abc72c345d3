"""
Minimal nREPL client: evaluate code and discover running servers.
"""

import socket
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from basic_tools_mcp.config import get_config
from basic_tools_mcp.exceptions import NreplError
from basic_tools_mcp.logging_config import logger
from basic_tools_mcp.result import Result

from .bencode import BencodeDecoder, BencodeError, encode

# Port files written by common Clojure tooling, relative to the project root
PORT_FILES = [
    ".nrepl-port",
    ".shadow-cljs/nrepl.port",
    ".calva/nrepl-port",
]

CONNECT_PROBE_TIMEOUT_S = 0.5


@dataclass(frozen=True)
class NreplFailure:
    kind: str
    message: str
    host: Optional[str] = None
    port: Optional[int] = None


@dataclass
class EvalOutcome:
    """Everything an eval produced, in arrival order per stream."""

    values: List[str]
    out: List[str]
    err: List[str]
    exceptions: List[str]
    namespace: Optional[str] = None

    def transcript(self) -> str:
        """Human-readable output: stdout, stderr, then '=> value' lines."""
        parts = []
        if self.out:
            parts.append("".join(self.out).rstrip("\n"))
        if self.err:
            parts.append("".join(self.err).rstrip("\n"))
        parts.extend(f"=> {value}" for value in self.values)
        if self.exceptions:
            parts.append("Exception: " + ", ".join(self.exceptions))
        return "\n".join(part for part in parts if part)


class NreplClient:
    """One nREPL connection; use as a context manager."""

    def __init__(self, port: int, host: Optional[str] = None, timeout_ms: Optional[int] = None):
        config = get_config()
        self.host = host or config.nrepl_host
        self.port = int(port)
        self.timeout_s = (timeout_ms if timeout_ms is not None else config.nrepl_timeout_ms) / 1000.0
        self._sock: Optional[socket.socket] = None
        self._decoder = BencodeDecoder()

    def connect(self) -> "NreplClient":
        try:
            self._sock = socket.create_connection((self.host, self.port), timeout=self.timeout_s)
        except OSError as e:
            raise NreplError(self.host, self.port, f"connection failed: {e}")
        return self

    def close(self) -> None:
        if self._sock is not None:
            try:
                self._sock.close()
            finally:
                self._sock = None

    def __enter__(self) -> "NreplClient":
        return self.connect()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def send(self, message: Dict[str, Any]) -> None:
        if self._sock is None:
            raise NreplError(self.host, self.port, "not connected")
        try:
            self._sock.sendall(encode(message))
        except OSError as e:
            raise NreplError(self.host, self.port, f"send failed: {e}")

    def _receive(self, deadline: float) -> List[Dict[str, Any]]:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise NreplError(self.host, self.port, f"timeout after {self.timeout_s:g}s")
        self._sock.settimeout(remaining)
        try:
            chunk = self._sock.recv(65536)
        except socket.timeout:
            raise NreplError(self.host, self.port, f"timeout after {self.timeout_s:g}s")
        except OSError as e:
            raise NreplError(self.host, self.port, f"receive failed: {e}")
        if not chunk:
            raise NreplError(self.host, self.port, "connection closed by server")
        try:
            return [m for m in self._decoder.feed(chunk) if isinstance(m, dict)]
        except BencodeError as e:
            raise NreplError(self.host, self.port, f"protocol error: {e}")

    def eval(self, code: str, ns: Optional[str] = None) -> EvalOutcome:
        """Send an eval op and collect responses until its status contains 'done'."""
        message_id = str(uuid.uuid4())
        request: Dict[str, Any] = {"op": "eval", "code": code, "id": message_id}
        if ns:
            request["ns"] = ns
        self.send(request)

        outcome = EvalOutcome(values=[], out=[], err=[], exceptions=[])
        deadline = time.monotonic() + self.timeout_s
        while True:
            for response in self._receive(deadline):
                if response.get("id") not in (None, message_id):
                    continue
                if "value" in response:
                    outcome.values.append(str(response["value"]))
                if "out" in response:
                    outcome.out.append(str(response["out"]))
                if "err" in response:
                    outcome.err.append(str(response["err"]))
                if "ex" in response:
                    outcome.exceptions.append(str(response["ex"]))
                if "ns" in response:
                    outcome.namespace = str(response["ns"])
                status = response.get("status") or []
                if "done" in status:
                    return outcome


def eval_code(
    code: str,
    port: int,
    host: Optional[str] = None,
    timeout_ms: Optional[int] = None,
) -> Result[str]:
    """
    Evaluate code on an nREPL server.

    Returns:
        Result with the eval transcript, or an NreplFailure of kind 'eval-failed'
    """
    client = NreplClient(port, host=host, timeout_ms=timeout_ms)
    try:
        with client:
            outcome = client.eval(code)
    except NreplError as e:
        logger.error(f"nREPL eval failed: {e}")
        return Result.err(NreplFailure("eval-failed", str(e), e.host, e.port))

    logger.debug(f"nREPL eval on {client.host}:{client.port} returned {len(outcome.values)} values")
    return Result.ok(outcome.transcript())


def _port_is_open(host: str, port: int) -> bool:
    try:
        with socket.create_connection((host, port), timeout=CONNECT_PROBE_TIMEOUT_S):
            return True
    except OSError:
        return False


def discover_ports(directory: Optional[str] = None, host: Optional[str] = None) -> Result[List[Dict[str, Any]]]:
    """
    Find nREPL servers advertised by port files under directory (default: cwd).

    Only ports that accept a TCP connection are returned.
    """
    root = Path(directory) if directory else Path.cwd()
    host = host or get_config().nrepl_host
    if not root.is_dir():
        return Result.err(NreplFailure("discover-failed", f"Directory not found: {root}"))

    found: List[Dict[str, Any]] = []
    seen = set()
    for relative in PORT_FILES:
        port_file = root / relative
        if not port_file.is_file():
            continue
        try:
            port = int(port_file.read_text(encoding="utf-8").strip())
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable port file {port_file}: {e}")
            continue
        if port in seen:
            continue
        seen.add(port)
        if _port_is_open(host, port):
            found.append({"host": host, "port": port, "port_file": str(port_file)})
        else:
            logger.debug(f"Port {port} from {port_file} is not accepting connections")

    return Result.ok(found)
