"""Application layer: DTOs, interfaces, services.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (user repository, session store,
hashing, tokens, e-mail).
"""
