__version__ = "2023.40.72"
