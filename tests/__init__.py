"""FIXTUREGATE test suite.

Folder taxonomy
- unit/         : Isolated, fast checks of a single module/class/function.
- contract/     : Behavior every inventory/search backend must share, run against
                  the in-memory adapters and the httpx adapters over fake servers.
- integration/  : The bootstrap wiring end to end over in-memory remotes.
- e2e/          : The `fixturegate` CLI invoked through click's CliRunner.
- fixtures/     : Shared pytest fixtures (fake clock, in-memory remotes).

General guidance
- No test touches the network; remote services are in-memory fakes or
  httpx.MockTransport handlers.
- Anything that waits runs on the fake clock, so no test sleeps.
- Markers (unit, contract, integration, e2e) are applied by directory in the
  root conftest.
"""
