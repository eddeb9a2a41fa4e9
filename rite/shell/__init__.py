"""Host services that sit between ROM files, the core and the window."""
