"""Mobile app performance test bootstrap: config loading, app resolution and Appium sessions."""

__version__ = "0.1.0"
