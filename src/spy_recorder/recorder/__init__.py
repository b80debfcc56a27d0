"""Call recording spies and the assertions that inspect them."""

# Submodules are imported explicitly by callers; nothing is re-exported here.

__all__: list[str] = []
