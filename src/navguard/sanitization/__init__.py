"""Navigation-redirect sanitization of JavaScript source."""
