"""Interactive shell for running diagnostics."""

from interaction.shell import DiagnosticShell

__all__ = ["DiagnosticShell"]
