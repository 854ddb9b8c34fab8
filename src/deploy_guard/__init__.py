"""
deploy-guard — package root

File: src/deploy_guard/__init__.py
Last updated: 2026-10-19

Purpose
- Package root for the pre-deploy/pre-retrieve conflict gate.
- The public surface is the postcondition checker family in ``deploy_guard.checks``.

Functional requirements
- Must not have side effects at import time (no config loading, no logging init).
"""

__version__ = "0.3.0"

__all__ = ["__version__"]
