"""Infrastructure layer: Redis session store, security primitives, persistence
and external adapters. Implements the application ports.
"""
