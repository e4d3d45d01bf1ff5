"""
Backend Scripts Module

This module contains command line helpers for workflow definitions.

Available scripts:
    - validate_workflow.py: Validates a built-in definition and prints its structure

Usage:
    python scripts/validate_workflow.py authorization
"""
