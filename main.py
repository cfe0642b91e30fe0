#!/usr/bin/env python3
"""Depgrapher - dependency graphs from Makefile-like text

Usage:
    depgrapher [-s SYNTAX] [-n NODE] [-o stdout|PATH] [-f dot|json] [files ...]

Layout:
- syntax/: Syntax definitions, presets and the selector parser
- graph/: Node protocol, networkx backend, DependencyGraph
- parsers/: Logical lines and the ingestion engine
- runtime/: Worker pool used during ingestion
- render/: ASCII tree layout and terminal wrapping
- export/: Dot (graph writer) and JSON exporters
"""

import sys

from depgrapher.main import main

if __name__ == "__main__":
    sys.exit(main())
