"""pygame host: window, main loop and keyboard input."""
