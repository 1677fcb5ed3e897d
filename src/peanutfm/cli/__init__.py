"""Terminal front-end: rendering and the interactive shell."""
