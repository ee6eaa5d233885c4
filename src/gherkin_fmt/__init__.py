from importlib.metadata import version, PackageNotFoundError


try:
    __version__ = version('gherkin-fmt')
except PackageNotFoundError:
    __version__ = 'unknown'
