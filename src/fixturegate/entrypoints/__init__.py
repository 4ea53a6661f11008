"""Entrypoints (inbound adapters) for FIXTUREGATE.

Expose the fixture gate to the outside world: the ``fixturegate`` CLI and the
pytest plugin. Parse inputs, call into the bootstrap facade, and present
outcomes.

Dependency rule: may import `fixturegate.bootstrap` and
`fixturegate.service_layer`; avoid importing `fixturegate.adapters` directly.
"""
