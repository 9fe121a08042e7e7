"""Filesystem (``fs_utils``) and string (``str_utils``) helpers."""
