from setuptools import setup

#==============================================================================
def get_version():
    """ Get the package version from pyproject.toml """
    with open('pyproject.toml', encoding='utf-8') as f:
        line = next(l for l in f if l.startswith('version'))
    return line.split('=')[1].strip("'\"\n ")

#==============================================================================
setup(
    version = get_version(),
)
