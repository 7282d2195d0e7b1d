from setuptools import setup

setup(name = 'pyfrog',
      version = '0.1.0',
      description = '''Builds an analysis-ready dataset of repeated growth
measurements for frogs from capture-mark-recapture surveys, with population
and frog type classification of translocated and reintroduced frogs.''',
      license = 'MIT',
      packages = ['pyfrog',],
      python_requires= '>=3.9',
      install_requires=["numpy >= 1.17.4",
                        "pandas >= 1.5"],
      extras_require={"test": ["pytest"]},
      zip_safe = False
      )
