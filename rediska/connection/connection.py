"""
Redis Connection Module

A single logical connection to a Redis server. It owns the transport
lifecycle and provides the four primitives the command layer builds on:

    write(payload)   - send one command line, connecting first if needed
    read_line()      - read one reply line
    read(length)     - read a bulk payload of known size
    disconnect()     - send QUIT and close

Usage:
    with Connection({"host": "127.0.0.1", "port": 6379}) as conn:
        conn.write("PING")
        conn.read_line()  # '+PONG'
"""

import logging
from typing import Any, Callable, Mapping, Optional, Union

from ..config.settings import settings
from ..protocol.commands import (
    BULK_TERMINATOR_LENGTH,
    EOL,
    CommandType,
    auth_command,
    format_command,
)
from .exceptions import RediskaConnectionError
from .options import ConnectionOptions, normalize_options, validate_option_name
from .transport import open_transport

logger = logging.getLogger(__name__)

NOT_CONNECTED_MESSAGE = (
    "Can't read without connection to Redis server. Do connect or write first."
)


class Connection:
    """
    Blocking connection to one Redis endpoint.

    The transport is opened lazily by connect() or the first write(), and
    is released by disconnect(), by leaving a ``with`` block, by any read
    or write failure, and when the object is finalized. After a failure
    the next connect() starts from scratch.

    A Connection does no locking; share one between threads only with
    external synchronization.

    Attributes:
        options: The ConnectionOptions currently in effect
    """

    def __init__(
            self,
            options: Optional[Mapping[str, Any]] = None,
            transport_factory: Callable = open_transport,
    ):
        """
        Initialize the connection.

        Args:
            options: Mapping with any of host, port, weight, persistent,
                password, alias (names are case-insensitive)
            transport_factory: Callable(host, port, persistent=, password=)
                returning an open transport; raises OSError on failure

        Raises:
            ConfigurationError: if options contains an unknown name
        """
        self._transport = None
        self._transport_factory = transport_factory
        self.options = ConnectionOptions()
        self.set_options(normalize_options(options))

    def __del__(self):
        if getattr(self, "_transport", None) is not None:
            self.disconnect()

    def __enter__(self) -> "Connection":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()

    # ------------------------------------------------------------------
    # Options
    # ------------------------------------------------------------------

    def set_options(self, options: Mapping[str, Any]) -> "Connection":
        """
        Apply several options at once.

        Options with a dedicated setter go through it; the rest are stored
        with set_option().
        """
        setters = {
            "host": self.set_host,
            "port": self.set_port,
            "weight": self.set_weight,
            "password": self.set_password,
            "alias": self.set_alias,
        }
        for name, value in options.items():
            name = str(name).lower()
            setter = setters.get(name)
            if setter is not None:
                setter(value)
            else:
                self.set_option(name, value)
        return self

    def set_option(self, name: str, value: Any) -> "Connection":
        """
        Set a single option.

        Raises:
            ConfigurationError: if name is not a known option
        """
        setattr(self.options, validate_option_name(name), value)
        return self

    def get_option(self, name: str) -> Any:
        """
        Get a single option.

        Raises:
            ConfigurationError: if name is not a known option
        """
        return getattr(self.options, validate_option_name(name))

    def set_host(self, host: str) -> "Connection":
        return self.set_option("host", host)

    def set_port(self, port: int) -> "Connection":
        return self.set_option("port", int(port))

    def set_weight(self, weight: int) -> "Connection":
        return self.set_option("weight", int(weight))

    def set_password(self, password: Optional[str]) -> "Connection":
        return self.set_option("password", password)

    def set_alias(self, alias: Optional[str]) -> "Connection":
        return self.set_option("alias", alias)

    def get_host(self) -> str:
        return self.options.host

    def get_port(self) -> int:
        return self.options.port

    def get_weight(self) -> int:
        return self.options.weight

    def get_password(self) -> Optional[str]:
        return self.options.password

    @property
    def is_connected(self) -> bool:
        return self._transport is not None and not self._transport.closed

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    def connect(self) -> bool:
        """
        Open the transport and authenticate, if not already connected.

        The AUTH reply is read but not checked: a rejected password shows
        up as failures of later commands.

        Returns:
            True if a new connection was made, False if already connected

        Raises:
            RediskaConnectionError: if the server can't be reached
        """
        if self._transport is not None:
            if not self._transport.closed:
                return False
            # Closed underneath us by another persistent sharer
            logger.debug(f"Dropping closed transport to {self}")
            self._transport = None

        host, port = self.get_host(), self.get_port()
        try:
            self._transport = self._transport_factory(
                host,
                port,
                persistent=bool(self.options.persistent),
                password=self.get_password(),
            )
        except OSError as e:
            self._transport = None
            message = f"Can't connect to Redis server on {host}:{port}"
            detail = e.strerror or (str(e) if not e.errno else "")
            if e.errno or detail:
                message += ","
                if e.errno:
                    message += f" error {e.errno}"
                if detail:
                    message += f" {detail}"
            logger.error(message)
            raise RediskaConnectionError(message, host=host, port=port, errno=e.errno) from e

        logger.debug(f"Connected to {self}")

        password = self.get_password()
        if password:
            self.write(auth_command(password))
            self.read_line()
            logger.debug(f"Sent AUTH to {self}")

        return True

    def disconnect(self) -> bool:
        """
        Send QUIT and close the transport.

        QUIT is advisory: a failure to send it is ignored.

        Returns:
            True if an open connection was closed, False if there was none
            (including a shared transport already closed by another
            persistent connection)
        """
        transport = self._transport
        if transport is None:
            return False

        self._transport = None

        if transport.closed:
            return False

        quit_line = self._encode(format_command(CommandType.QUIT) + EOL)
        try:
            self._send_all(transport, quit_line)
        except OSError as e:
            logger.debug(f"Ignoring QUIT failure on {self}: {e}")

        try:
            transport.close()
        except OSError as e:
            logger.warning(f"Error closing connection to {self}: {e}")

        logger.debug(f"Disconnected from {self}")
        return True

    # ------------------------------------------------------------------
    # I/O primitives
    # ------------------------------------------------------------------

    def write(self, payload: Union[str, bytes]) -> bool:
        """
        Send one command line, connecting first if necessary.

        Args:
            payload: Command without line terminator

        Returns:
            False for an empty payload (nothing is sent), True otherwise

        Raises:
            RediskaConnectionError: if connecting or sending fails
        """
        if not payload:
            return False

        data = self._encode(payload) + self._encode(EOL)

        self.connect()

        try:
            self._send_all(self._transport, data)
        except OSError as e:
            logger.error(f"Write to {self} failed: {e}")
            self.disconnect()
            raise RediskaConnectionError("Can't write to socket.") from e

        return True

    def read_line(self) -> str:
        """
        Read one reply line.

        The line is decoded with settings.ENCODING; undecodable bytes are
        replaced with U+FFFD. Use read() for binary payloads.

        Returns:
            The line with surrounding whitespace and EOL stripped

        Raises:
            RediskaConnectionError: if not connected, or the read fails
        """
        transport = self._require_transport()

        try:
            line = transport.readline()
        except OSError as e:
            raise self._read_error(e) from e

        if not line:
            raise self._read_error()

        return line.decode(settings.ENCODING, errors="replace").strip()

    def read(self, length: int) -> bytes:
        """
        Read a bulk payload of length bytes and its trailing EOL.

        Returns:
            The payload, without the trailing EOL

        Raises:
            RediskaConnectionError: if not connected, or any read fails
        """
        self._require_transport()

        payload = self._read_exact(length)
        self._read_exact(BULK_TERMINATOR_LENGTH)

        return payload

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_transport(self):
        if self._transport is None:
            raise RediskaConnectionError(NOT_CONNECTED_MESSAGE)
        return self._transport

    def _read_exact(self, length: int) -> bytes:
        buffer = bytearray()
        remaining = length

        while remaining > 0:
            try:
                data = self._transport.read(remaining)
            except OSError as e:
                raise self._read_error(e) from e

            if not data:
                raise self._read_error()

            buffer += data
            remaining -= len(data)

        return bytes(buffer)

    def _read_error(self, cause: Optional[Exception] = None) -> RediskaConnectionError:
        """Drop the connection and build the error to raise."""
        reason = cause if cause is not None else "connection closed by server"
        logger.error(f"Read from {self} failed: {reason}")
        self.disconnect()
        return RediskaConnectionError("Can't read from socket.")

    @staticmethod
    def _send_all(transport, data: bytes) -> None:
        while data:
            sent = transport.send(data)
            # A zero-length send is taken as completion
            if sent == 0:
                return
            data = data[sent:]

    @staticmethod
    def _encode(payload: Union[str, bytes]) -> bytes:
        if isinstance(payload, bytes):
            return payload
        return str(payload).encode(settings.ENCODING)

    def __str__(self) -> str:
        if self.options.alias:
            return str(self.options.alias)
        return f"{self.options.host}:{self.options.port}"

    def __repr__(self) -> str:
        return f"Connection({self}, connected={self.is_connected})"
