"""Unified command-line interface for keibaslip.

Usage:
    keibaslip parse [file] [--no-ai] [--json]
    keibaslip scan <image> [--no-ai] [--json]
    keibaslip serve [--host] [--port]
"""
