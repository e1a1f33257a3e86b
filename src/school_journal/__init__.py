"""School Journal package.

Feature modules (users, journals) carry the backend: thin Flask controllers
over service/repository layers. The ``client`` package holds the
synchronization side that talks to that backend over HTTP.
"""
