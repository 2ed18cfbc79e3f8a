"""Folklore archive browsing client: data provider, identity and record schema."""
