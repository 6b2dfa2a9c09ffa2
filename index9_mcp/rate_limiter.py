# -*- coding: utf-8 -*-
"""Location: ./index9_mcp/rate_limiter.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: index9 contributors

Per-tool request quota.
Enforces in-memory rate limits keyed by tool name using a fixed window.
Each tool gets its own window; there is no global budget.

Examples:
    >>> limiter = RateLimiter(window_ms=1000, max_requests=2, clock=lambda: 0.0)
    >>> [limiter.admit("get_model") for _ in range(3)]
    [True, True, False]
    >>> limiter.admit("find_models")
    True
"""

# Future
from __future__ import annotations

# Standard
from dataclasses import dataclass
import threading
import time
from typing import Callable, Dict


@dataclass
class RateWindow:
    """Rate limiting window for one tool.

    Attributes:
        tool_name: Tool the window belongs to.
        count: Admissions in the current window.
        reset_at: Clock reading (seconds) after which the window expires.
    """

    tool_name: str
    count: int
    reset_at: float


class RateLimiter:
    """Fixed-window admission counter with one window per tool name."""

    def __init__(self, window_ms: int, max_requests: int, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize the limiter.

        Args:
            window_ms: Window length in milliseconds.
            max_requests: Admissions allowed per window for each tool.
            clock: Source of the current time in seconds.

        Raises:
            ValueError: If the window or the ceiling is not positive.
        """
        if window_ms <= 0:
            raise ValueError("window_ms must be positive")
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        self.window_seconds = window_ms / 1000
        self.max_requests = max_requests
        self._clock = clock
        self._windows: Dict[str, RateWindow] = {}
        self._lock = threading.Lock()

    def admit(self, tool_name: str) -> bool:
        """Decide whether a call to ``tool_name`` may proceed.

        The first call for a tool, or the first call after its window expired,
        starts a new window. Rejected calls do not increment the counter.

        Args:
            tool_name: Name of the tool being invoked.

        Returns:
            bool: True if admitted, False if the tool's quota is used up.
        """
        with self._lock:
            now = self._clock()
            wnd = self._windows.get(tool_name)
            if wnd is None or now > wnd.reset_at:
                self._windows[tool_name] = RateWindow(tool_name=tool_name, count=1, reset_at=now + self.window_seconds)
                return True
            if wnd.count >= self.max_requests:
                return False
            wnd.count += 1
            return True

    def remaining(self, tool_name: str) -> int:
        """Admissions left for ``tool_name`` in its current window.

        Args:
            tool_name: Name of the tool.

        Returns:
            int: Remaining admissions; the full ceiling when no window is active.
        """
        with self._lock:
            wnd = self._windows.get(tool_name)
            if wnd is None or self._clock() > wnd.reset_at:
                return self.max_requests
            return self.max_requests - wnd.count

    def reset(self) -> None:
        """Drop all windows."""
        with self._lock:
            self._windows.clear()
