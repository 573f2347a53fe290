__app_name__ = "quickplay"
__version__ = "1.0.0"
