#!/usr/bin/env python3
"""
FRKN Trial - server entry point
"""

import sys

from .config import ServerSettings
from .exceptions import ConfigurationError


def main(argv=None):
    """Run the trial API under uvicorn"""
    import argparse

    import uvicorn

    try:
        settings = ServerSettings.from_env()
    except ConfigurationError as e:
        print(f"❌ {e}")
        sys.exit(2)

    parser = argparse.ArgumentParser(
        description='FRKN Trial - trial activation gateway'
    )
    parser.add_argument(
        '--host',
        default=settings.host,
        help=f'bind address (default: {settings.host})'
    )
    parser.add_argument(
        '--port',
        type=int,
        default=settings.port,
        help=f'bind port (default: {settings.port})'
    )
    parser.add_argument(
        '--journal',
        default=settings.journal_path,
        help=f'trial journal CSV (default: {settings.journal_path})'
    )

    args = parser.parse_args(argv)

    from .api_server import app

    app.state.settings = ServerSettings(
        host=args.host,
        port=args.port,
        journal_path=args.journal,
        log_level=settings.log_level,
    )

    try:
        uvicorn.run(
            app,
            host=args.host,
            port=args.port,
            reload=False,
            log_level=settings.log_level.lower(),
        )
    except KeyboardInterrupt:
        print("\n\n⚠️  Interrupted")
        sys.exit(130)


if __name__ == "__main__":
    main()
