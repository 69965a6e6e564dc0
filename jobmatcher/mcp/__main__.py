#!/usr/bin/env python3
# SPDX-License-Identifier: Apache-2.0
"""Entry point for `python -m jobmatcher.mcp`."""

import logging
import sys

from .cli_main import main

if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        sys.exit(0)
    except Exception as e:
        logging.getLogger(__name__).error("Fatal error: %s", e, exc_info=True)
        sys.exit(1)
