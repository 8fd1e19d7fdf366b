"""Settings, logging, persistence and shared errors."""
