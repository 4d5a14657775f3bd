"""App resolution, capability building and Appium session helpers."""
