"""Command line interface for custodian."""

from custodian.cli.main import CustodianCLI

__all__ = ["CustodianCLI"]
