"""Service layer for mangashelf."""
