"""auth/ -- Token-to-identity resolution for the clients service.

Layer rule: auth/ imports only stdlib + third-party libraries + core/.
It does NOT import from api/, clients/, or cache/. The session store is
injected as anything satisfying auth.resolver.SessionLookup.
"""
