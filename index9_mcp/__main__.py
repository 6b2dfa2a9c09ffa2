# -*- coding: utf-8 -*-
"""Location: ./index9_mcp/__main__.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: index9 contributors

Allow ``python -m index9_mcp``.
"""

# First-Party
from index9_mcp.server_fastmcp import main

if __name__ == "__main__":  # pragma: no cover
    main()
