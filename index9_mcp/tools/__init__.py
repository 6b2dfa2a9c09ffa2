# -*- coding: utf-8 -*-
"""Tool handlers.

Location: ./index9_mcp/tools/__init__.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: index9 contributors

Each handler maps a validated request to one backend call and reshapes the result.
"""
