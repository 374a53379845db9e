#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
usergraph GraphQL API server entrypoint.
Delegates to the FastAPI app factory in usergraph/api/main.py
"""

import argparse
import os

import uvicorn


def main(argv=None):
    """Main function to run the FastAPI application"""
    parser = argparse.ArgumentParser(description='usergraph GraphQL API Server')
    parser.add_argument('-H', '--host', default=os.environ.get('UG_API_HOST', '127.0.0.1'), help='Host to bind to')
    parser.add_argument('-p', '--port', type=int, default=os.environ.get('UG_API_PORT', '8000'), help='Port to bind to')
    parser.add_argument('-d', '--db-path', help='SQLite database file')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    parser.add_argument('--reload', action='store_true', help='Enable auto-reload for development')
    args = parser.parse_args(argv)

    # The app factory reads its configuration from the environment, which
    # reload workers inherit.
    os.environ['UG_API_HOST'] = args.host
    os.environ['UG_API_PORT'] = str(args.port)
    if args.db_path:
        os.environ['UG_DB_PATH'] = args.db_path
    if args.debug:
        os.environ['UG_DEBUG'] = '1'

    uvicorn.run(
        "usergraph.api.main:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="debug" if args.debug else "info",
    )


if __name__ == "__main__":
    main()
