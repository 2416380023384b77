"""Application infrastructure: state, lifecycle, auth, and errors."""
