"""auth/ -- Credential and session-token lifecycle for SessionGate.

Layer rule: auth/ imports only stdlib + third-party libraries.
It does NOT import from api/, client/, or core/.
api/ imports from auth/, not the other way around.
"""
