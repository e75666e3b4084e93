"""
handlers/ - Presentation Layer
================================
Free-text command handling. The router classifies each incoming message,
delegates to the appropriate Service, and returns the reply text.
No business logic lives here.
"""
