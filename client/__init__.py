"""client/ -- Command-line client for the SessionGate API.

Layer rule: client/ talks to the server over HTTP only. It does NOT import
from api/ or auth/.
"""
