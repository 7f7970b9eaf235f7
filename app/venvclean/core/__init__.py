"""Core infrastructure: channels, session state, configuration and theming."""
