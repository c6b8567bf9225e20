"""Command-line tools for HSU.

- ``python -m hsu.cli canonicalize``: print the string a URL signs to
- ``python -m hsu.cli digest``: print the digest for a URL and salt
- ``python -m hsu.cli verify``: check a signed URL against a known salt
"""
