"""Integration tests.

Purpose
- Exercise the bootstrap composition root: credentials to remote services to a
  ready gate, with the same wiring production uses.

Guidelines
- Remote services are the in-memory adapters or httpx.MockTransport handlers;
  nothing reaches New Relic.
- Assert on what the remotes saw (lists, deletes, searches, agent calls).
"""
