# -*- coding: utf-8 -*-
"""index9 MCP gateway.

Location: ./index9_mcp/__init__.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: index9 contributors

Exposes the index9 AI model catalog and live model testing as MCP tools.
"""

__version__ = "0.4.0"

__all__ = ["__version__"]
