"""Wrapper around the hugo executable."""

from hugobros.hugo.runner import CommandOutput, HugoRunner, ServerRegistry

__all__ = ["CommandOutput", "HugoRunner", "ServerRegistry"]
