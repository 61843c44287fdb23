"""
XNote Application.

- backend/: API, services, persistence, configuration and the trash purge job
"""
