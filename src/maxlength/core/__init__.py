"""
Core domain models, decimal arithmetic, and attribute contracts.

This module contains the foundational building blocks that are independent
of the host UI (element lookup, event wiring, rendering).
"""
