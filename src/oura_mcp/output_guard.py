"""Gate between program output and the protocol transport.

The MCP stdio transport shares stdout with anything else in the process
that prints. A single stray line there corrupts every in-flight request, so
all output goes through OutputGuard: complete JSON-RPC frames reach the
transport, everything else is redirected to the diagnostic channel.
"""

import io
import json
import sys
import threading
from typing import BinaryIO, TextIO


def is_protocol_frame(text: str) -> bool:
    """True if ``text`` parses as a JSON object carrying a ``jsonrpc`` key."""
    try:
        message = json.loads(text)
    except ValueError:
        return False
    return isinstance(message, dict) and "jsonrpc" in message


class GuardedStream(io.TextIOBase):
    """Text stream with its own line buffer, routed by an OutputGuard.

    Each writer of stdout gets its own stream, so an unterminated write on
    one can never be glued onto a frame written through another.
    """

    def __init__(self, guard: "OutputGuard"):
        super().__init__()
        self._guard = guard
        self._pending = ""

    @property
    def encoding(self) -> str:
        return "utf-8"

    def writable(self) -> bool:
        return True

    def isatty(self) -> bool:
        return False

    def write(self, s: str) -> int:
        with self._guard._lock:
            self._pending += s
            while "\n" in self._pending:
                line, self._pending = self._pending.split("\n", 1)
                self._guard._route(line + "\n")
        return len(s)

    def flush(self) -> None:
        """Flush both channels.

        A pending candidate without its newline is sent if it is already a
        complete frame, held if it may still become one, and otherwise
        redirected.
        """
        with self._guard._lock:
            self._drain(final=False)
            self._guard._flush_channels()

    def _drain(self, final: bool) -> None:
        # caller holds the guard's lock
        candidate = self._pending
        if not candidate:
            return
        if (
            final
            or is_protocol_frame(candidate)
            or not candidate.lstrip().startswith("{")
        ):
            self._pending = ""
            self._guard._route(candidate)


class OutputGuard:
    """Routes writes to the transport or the diagnostic channel, line by line.

    The MCP transport writes through ``protocol_stream`` and everything
    else that prints goes through ``stdout_stream``. Each buffers until a
    newline, then each complete line is classified as a whole. A lock
    serialises writers so a frame is always written to the transport in
    one piece.
    """

    def __init__(self, transport: BinaryIO, diagnostic: TextIO):
        """Initialize OutputGuard.

        Args:
            transport: Binary stream the protocol runs over.
            diagnostic: Text stream for everything that is not a frame.
        """
        self.transport = transport
        self.diagnostic = diagnostic
        self._lock = threading.Lock()
        self.protocol_stream = GuardedStream(self)
        self.stdout_stream = GuardedStream(self)
        self._saved_stdout: TextIO | None = None

    @classmethod
    def for_stdio(cls) -> "OutputGuard":
        """Guard bound to the real stdout (transport) and stderr (diagnostics)."""
        return cls(sys.stdout.buffer, sys.stderr)

    def write(self, text: str) -> int:
        """Write as stray stdout output would."""
        return self.stdout_stream.write(text)

    def flush(self) -> None:
        with self._lock:
            for stream in (self.stdout_stream, self.protocol_stream):
                stream._drain(final=False)
            self._flush_channels()

    def close(self) -> None:
        """Route whatever is still pending; nothing is dropped."""
        with self._lock:
            for stream in (self.stdout_stream, self.protocol_stream):
                stream._drain(final=True)
            self._flush_channels()

    def install(self) -> None:
        """Replace sys.stdout so stray prints are routed through the guard.

        Idempotent; undone by uninstall().
        """
        if self._saved_stdout is not None:
            return
        self._saved_stdout = sys.stdout
        sys.stdout = self.stdout_stream

    def uninstall(self) -> None:
        if self._saved_stdout is None:
            return
        self.close()
        sys.stdout = self._saved_stdout
        self._saved_stdout = None

    def _flush_channels(self) -> None:
        self.transport.flush()
        self.diagnostic.flush()

    def _route(self, chunk: str) -> None:
        # caller holds the lock
        if is_protocol_frame(chunk):
            self.transport.write(chunk.encode("utf-8"))
            self.transport.flush()
        else:
            self.diagnostic.write(chunk)
            self.diagnostic.flush()
