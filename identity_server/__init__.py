"""Identity server exposing the registered OAuth2 providers over HTTP."""
