"""wxPython user interface."""
