"""PyQt6 bindings between config sections and the live main window."""
