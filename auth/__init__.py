"""auth/ -- Identity core for Vulnado: signed session tokens and user lookup.

Layer rule: auth/ imports only stdlib + third-party libraries. It does NOT
import from core/ or main.py -- the secret and the datastore connection
factory are handed in by the caller.
"""
