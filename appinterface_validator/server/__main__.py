#!/usr/bin/env python3

"""Entry point for the AppInterface Language Server."""

import argparse
from typing import List, Optional

from ..config import validator_config
from .base_server import AppInterfaceLanguageServer


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description='AppInterface YAML language server')
    parser.add_argument('--tcp', action='store_true', help='Serve over TCP instead of stdio')
    parser.add_argument('--host', default='127.0.0.1', help='TCP host (default: 127.0.0.1)')
    parser.add_argument('--port', type=int, default=2087, help='TCP port (default: 2087)')
    parser.add_argument('--log-level', default=None, help='Logging level (default: from environment)')
    parser.add_argument('--log-file', default=None, help='Also write logs to this file')
    args = parser.parse_args(argv)

    if args.log_level:
        validator_config.log_level = args.log_level
    if args.log_file:
        validator_config.log_file = args.log_file
    validator_config.set_server_logging()

    server = AppInterfaceLanguageServer(validator_config)
    if args.tcp:
        server.start_tcp(args.host, args.port)
    else:
        server.start()


if __name__ == '__main__':
    main()
