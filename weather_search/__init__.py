"""Weather Search - city and location weather lookup with offline awareness"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("weather-search")
except PackageNotFoundError:
    __version__ = "dev"
