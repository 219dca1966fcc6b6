"""Configuration, security and wiring."""
