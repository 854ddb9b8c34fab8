"""Small shared helpers."""

from deploy_guard.utils.hashing import create_manifest, sha256_bytes, sha256_file

__all__ = ["create_manifest", "sha256_bytes", "sha256_file"]
