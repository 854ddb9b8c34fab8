"""
deploy-guard — integration test package

File: tests/integration/__init__.py
Last updated: 2026-10-19

Purpose
- Test package marker file for end-to-end CLI tests.

Functional requirements
- Must not trigger network access; remote state comes from local directories.
"""
