"""
Dirconverge Test Suite

- Engine and prober tests against the in-memory filesystem
- Tests against the real filesystem in temporary directories
- CLI tests through typer's CliRunner
"""
