"""taskauth: authentication and session lifecycle service."""
