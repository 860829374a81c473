"""HTTP API for XaviSwap quotes."""
