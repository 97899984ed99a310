"""Command-line client for the price plan comparator service.

The Typer application lives in ``cli.app``; it is not re-exported here so that
``cli.app`` keeps resolving to the module, which tests patch attributes on.
"""
