"""Provider clients and fetch-with-fallback services."""
