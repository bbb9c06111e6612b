"""State layer.

Owns the persisted view of the board (snapshot file + initialization
marker) and the pure diff that turns two views into change events.
"""
