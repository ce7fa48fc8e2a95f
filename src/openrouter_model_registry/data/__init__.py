"""Bundled data package for the OpenRouter model registry.

This namespace exposes the packaged model snapshot (latest.json) via
importlib.resources. It is not intended for direct import by users.
"""
