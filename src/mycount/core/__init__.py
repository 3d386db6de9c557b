"""Core time computation, rollover and storage for mycount."""
