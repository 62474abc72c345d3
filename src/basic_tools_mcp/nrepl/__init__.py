"""nREPL support: bencode codec, eval and server discovery."""

from .bencode import BencodeDecoder, BencodeError, decode, encode
from .client import EvalOutcome, NreplClient, NreplFailure, discover_ports, eval_code

__all__ = [
    "encode",
    "decode",
    "BencodeDecoder",
    "BencodeError",
    "NreplClient",
    "EvalOutcome",
    "NreplFailure",
    "eval_code",
    "discover_ports",
]
