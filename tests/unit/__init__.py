"""Unit tests.

Purpose
- Verify a single module/class/function in isolation.

Guidelines
- No real network or sleeping; use the in-memory remotes and the fake clock.
- Prefer behavior-centric assertions over implementation details.
"""
