"""Match Insight Client - streaming consumer for a match analysis service.

Combines httpx for streaming HTTP, Pydantic for data validation and NiceGUI
for the query page.

Components:
    - client: configuration and cancellable HTTP transport
    - stream: frame decoding, classification, normalization, session state
    - models: request, event and result schemas
    - ui: query page bound to a session controller
"""

__version__ = "0.1.0"
