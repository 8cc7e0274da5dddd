"""Workflow orchestration on top of the pure slip parsers and runtime clients."""
