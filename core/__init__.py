"""Core services for MediaDeck: path sanitation, catalog, document storage, accounts, library."""
