"""
Core domain models, error taxonomy and JSON contracts.

This module contains the foundational building blocks that are independent
of the registry stores and of the execution environment.
"""
