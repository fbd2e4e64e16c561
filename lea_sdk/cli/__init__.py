"""
lea_sdk.cli
===========

Typer-based command line for the Lea SDK. The console script `lea-sdk`
points at :func:`lea_sdk.cli.main.main`; `lea_sdk.cli.main` itself stays the
submodule.

    $ lea-sdk --cluster local balance lea1...
"""

from __future__ import annotations

from .main import app  # noqa: F401

__all__ = ["app"]
