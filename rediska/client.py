#!/usr/bin/env python3
"""
Interactive Client for Rediska

A small command-line client for manually talking to a Redis server
through a single Connection.

Usage:
    rediska-cli                       # Connect to 127.0.0.1:6379
    rediska-cli --host 1.2.3.4        # Connect to specific host
    rediska-cli --password secret     # Authenticate after connecting
    rediska-cli --debug               # Enable debug logging

Commands:
    Any server command line (PING, SET key value, GET key, ...)
    help                      - Show this help
    status                    - Show connection status
    reconnect                 - Drop and reopen the connection
    exit                      - Exit client
"""

import argparse
import logging
import sys

from .config.settings import settings
from .connection import Connection, RediskaError
from .protocol.replies import Reply, ReplyStatus, read_reply

# Enable command history with arrow keys (works on Unix systems)
try:
    import readline  # noqa: F401
except ImportError:
    pass  # readline not available on Windows by default


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Interactive client for a Redis server",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--host", type=str, default=settings.HOST, help="Server host")
    parser.add_argument("--port", type=int, default=settings.PORT, help="Server port")
    parser.add_argument("--password", type=str, default=None, help="Password sent with AUTH")
    parser.add_argument("--alias", type=str, default=None, help="Name shown for this connection")
    parser.add_argument(
        "--persistent",
        action="store_true",
        help="Reuse an open socket to the same server",
    )
    parser.add_argument("--debug", action="store_true", default=settings.DEBUG, help="Enable debug logging")
    return parser.parse_args(argv)


def setup_logging(debug: bool = False) -> None:
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )


def format_reply(reply: Reply) -> str:
    """
    Render a reply the way it is printed at the prompt.

    Examples:
        >>> format_reply(Reply(ReplyStatus.STATUS, "OK"))
        'OK'
        >>> format_reply(Reply(ReplyStatus.BULK, None))
        '(nil)'
    """
    if reply.status == ReplyStatus.ERROR:
        return f"(error) {reply.value}"
    if reply.status == ReplyStatus.INTEGER:
        return f"(integer) {reply.value}"
    if reply.status == ReplyStatus.MULTI_BULK:
        if reply.value is None:
            return "(nil)"
        if not reply.value:
            return "(empty list)"
        return "\n".join(
            f"{index}) {_format_bulk(item)}"
            for index, item in enumerate(reply.value, start=1)
        )
    if reply.status == ReplyStatus.BULK:
        return _format_bulk(reply.value)
    return str(reply.value)


def _format_bulk(value) -> str:
    if value is None:
        return "(nil)"
    return f'"{value.decode(settings.ENCODING, errors="replace")}"'


def run_command(connection: Connection, line: str) -> str:
    """
    Send one command line and return the printable reply.

    Returns an empty string when line is blank.
    """
    if not connection.write(line.strip()):
        return ""
    return format_reply(read_reply(connection))


def print_help():
    """Print help message."""
    print("""
Server Commands:
----------------
  Any command line is sent as is, e.g.:
  PING                      Check the server is alive
  SET <key> <value>         Store a value
  GET <key>                 Retrieve a value
  DEL <key>                 Delete a key

Client Commands:
----------------
  help                      Show this help message
  status                    Show connection status
  reconnect                 Reconnect to the server
  exit                      Exit the client (sends QUIT)
""")


def main(argv=None) -> None:
    """Main entry point for the interactive client."""
    args = parse_args(argv)
    setup_logging(debug=args.debug)

    connection = Connection({
        "host": args.host,
        "port": args.port,
        "password": args.password,
        "alias": args.alias,
        "persistent": args.persistent,
    })

    print(f"Connecting to {connection}...")
    try:
        connection.connect()
    except RediskaError as e:
        print(f"Failed to connect: {e}")
        sys.exit(1)

    print("Connected! Type 'help' for commands.\n")

    try:
        while True:
            try:
                command = input(f"{connection}> ").strip()
            except EOFError:
                print("\nGoodbye!")
                break

            if not command:
                continue

            lower_cmd = command.lower()

            if lower_cmd == "help":
                print_help()
                continue

            if lower_cmd in ("exit", "quit"):
                print("Goodbye!")
                break

            if lower_cmd == "status":
                status = "Connected" if connection.is_connected else "Disconnected"
                print(f"Status: {status}")
                print(f"Server: {connection.get_host()}:{connection.get_port()}")
                continue

            if lower_cmd == "reconnect":
                connection.disconnect()
                try:
                    connection.connect()
                    print("Reconnected!")
                except RediskaError as e:
                    print(f"Reconnection failed: {e}")
                continue

            try:
                print(run_command(connection, command))
            except RediskaError as e:
                print(f"ERROR: {e}")

    except KeyboardInterrupt:
        print("\n\nInterrupted. Goodbye!")
    finally:
        connection.disconnect()


if __name__ == "__main__":
    main()
