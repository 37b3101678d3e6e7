"""reticule -- manage connection profiles for an exchange trading-API client.

Profiles (API endpoints, credentials and server-mode settings) are stored
together in a single YAML file, ``~/.reticule/reticule``, alongside the
name of the current profile.

Typical workflow::

    reticule config create reticule --name sandbox --key K --passphrase P --secret S
    reticule config update reticule --name sandbox --rename staging --use
    reticule config list

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models for the stored config set.
    config: Config file location and load/save repository.
    profiles: Create, update and delete operations.
    storage: Swappable filesystem access.
    codec: YAML encoding of the config set.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes.
    output: stdout/stderr formatting with Rich.
"""

__version__ = "0.1.0"
