"""Adapters (infrastructure) for FIXTUREGATE.

Provide concrete implementations of the remote service interfaces: httpx-backed
REST and GraphQL clients, the New Relic agent launcher, in-memory fakes for
tests and demos, and the secret redactor.

Dependency rule: may import `fixturegate.interfaces` and `fixturegate.config`;
the service layer must not import this package.
"""
