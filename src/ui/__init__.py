"""NiceGUI interface - thin visualization layer for match queries.

Responsibilities:
    - Query input with highlight and ordering flags
    - Live progress log while the backend works
    - Summary, sources and error display once the session ends
    - Session teardown when the browser tab disconnects

Contains no stream handling. Delegates everything to the SessionController.
"""
