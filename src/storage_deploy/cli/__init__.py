"""Command line interface."""

from storage_deploy.cli.main import cli, main

__all__ = ['cli', 'main']
