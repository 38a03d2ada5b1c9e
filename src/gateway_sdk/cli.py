"""
Command-line interface for Gateway Python SDK
Fetch access tokens, make signed calls and compute signatures offline
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Dict, List, Optional

from .client import GatewayClient
from .config import (
    DEFAULT_CONFIG_SECTION,
    ClientConfig,
    load_client_config_from_env,
    load_client_config_from_file,
)
from .exceptions import GatewaySDKError, ProtocolError
from .signing.signer import RequestSigner
from .version import __version__


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog='gateway-cli',
        description='Gateway SDK command-line interface for signed requests and access tokens'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'Gateway Python SDK {__version__}'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable debug logging'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    setup_token_parser(subparsers)
    setup_call_parser(subparsers)
    setup_sign_parser(subparsers)

    return parser


def add_connection_arguments(parser: argparse.ArgumentParser) -> None:
    """Add arguments selecting the client configuration."""
    parser.add_argument('--config', help='JSON configuration file (defaults to GATEWAY_* environment variables)')
    parser.add_argument('--section', default=DEFAULT_CONFIG_SECTION, help='Configuration section name')
    parser.add_argument('--base-url', help='Override the gateway base URL')
    parser.add_argument('--access-id', help='Override the access ID')
    parser.add_argument('--secret-key', help='Override the secret key')
    parser.add_argument('--timeout', type=float, help='Timeout in seconds')


def setup_token_parser(subparsers):
    """Setup token subcommand."""
    token_parser = subparsers.add_parser('token', help='Fetch an access token')
    add_connection_arguments(token_parser)


def setup_call_parser(subparsers):
    """Setup call subcommand."""
    call_parser = subparsers.add_parser('call', help='Make a signed business request')
    call_parser.add_argument('method', help='HTTP method')
    call_parser.add_argument('path', help='Path relative to the base URL')
    call_parser.add_argument('--body', default=None, help='JSON request body')
    call_parser.add_argument('--query', action='append', default=[], metavar='KEY=VALUE', help='Query parameter (repeatable)')
    call_parser.add_argument('--header', action='append', default=[], metavar='NAME:VALUE', help='Extra header (repeatable)')
    add_connection_arguments(call_parser)


def setup_sign_parser(subparsers):
    """Setup offline sign subcommand."""
    sign_parser = subparsers.add_parser('sign', help='Compute signature headers without sending anything')
    sign_parser.add_argument('method', help='HTTP method')
    sign_parser.add_argument('path', help='Path relative to the base URL')
    sign_parser.add_argument('--access-id', required=True, help='Access ID')
    sign_parser.add_argument('--secret-key', required=True, help='Secret key')
    sign_parser.add_argument('--body', default=None, help='Request body')
    sign_parser.add_argument('--query', action='append', default=[], metavar='KEY=VALUE', help='Query parameter (repeatable)')
    sign_parser.add_argument('--nonce', help='Fixed nonce')
    sign_parser.add_argument('--timestamp', help='Fixed millisecond timestamp')


def parse_pairs(values: List[str], separator: str) -> Dict[str, str]:
    """Parse repeated ``KEY<sep>VALUE`` arguments."""
    pairs = {}
    for item in values:
        if separator not in item:
            raise ValueError(f"Expected KEY{separator}VALUE, got: {item}")
        key, value = item.split(separator, 1)
        pairs[key.strip()] = value.strip()
    return pairs


def load_config(args) -> ClientConfig:
    """Load client configuration from file or environment, applying overrides."""
    overrides = {
        'base_url': args.base_url,
        'access_id': args.access_id,
        'secret_key': args.secret_key,
        'timeout': args.timeout,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}

    if args.config:
        config = load_client_config_from_file(args.config, args.section)
    elif {'base_url', 'access_id', 'secret_key'} <= overrides.keys():
        return ClientConfig(**overrides)
    else:
        config = load_client_config_from_env()

    if not overrides:
        return config

    values = {
        'base_url': config.base_url,
        'access_id': config.access_id,
        'secret_key': config.secret_key,
        'timeout': config.timeout,
        'verify_ssl': config.verify_ssl,
        'user_agent': config.user_agent,
        'token_buffer_seconds': config.token_buffer_seconds,
        'default_headers': config.default_headers,
    }
    values.update(overrides)
    return ClientConfig(**values)


async def run_token_command(config: ClientConfig) -> str:
    async with GatewayClient(config) as client:
        return await client.get_token()


async def run_call_command(config: ClientConfig, args) -> str:
    async with GatewayClient(config) as client:
        return await client.request(
            args.method,
            args.path,
            body=args.body,
            query_params=parse_pairs(args.query, '='),
            headers=parse_pairs(args.header, ':'),
        )


def handle_token_command(args) -> int:
    """Handle token command."""
    config = load_config(args)
    token = asyncio.run(run_token_command(config))
    print(token)
    return 0


def handle_call_command(args) -> int:
    """Handle call command."""
    config = load_config(args)
    response = asyncio.run(run_call_command(config, args))
    print(response)
    return 0


def handle_sign_command(args) -> int:
    """Handle offline sign command."""
    signer = RequestSigner(args.access_id, args.secret_key)
    result = signer.sign(
        args.method,
        args.path,
        body=args.body,
        query_params=parse_pairs(args.query, '='),
        nonce=args.nonce,
        timestamp=args.timestamp,
    )
    print(json.dumps({
        'canonical_string': result.canonical_string,
        'signature': result.signature,
        'headers': result.headers,
    }, indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI

    Args:
        argv: Command line arguments (None to use sys.argv)

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    try:
        if args.command == 'token':
            return handle_token_command(args)
        elif args.command == 'call':
            return handle_call_command(args)
        elif args.command == 'sign':
            return handle_sign_command(args)
        else:
            # No command specified, show help
            parser.print_help()
            return 1

    except ProtocolError as e:
        print(f"Error: {e}", file=sys.stderr)
        if e.response_body:
            print(f"Response body: {e.response_body}", file=sys.stderr)
        return 1
    except GatewaySDKError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130


if __name__ == '__main__':
    sys.exit(main())
