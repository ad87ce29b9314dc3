"""Bot core package - bot lifecycle, plugin management and command sessions."""
