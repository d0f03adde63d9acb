from setuptools import setup, find_packages
from bgzfpy.__version import __version__

with open('README.md') as readme:
    setup(
        name='bgzfpy',
        version=__version__,
        packages=find_packages(exclude=['tests', 'tests.*']),
        long_description=readme.read(),
        long_description_content_type='text/markdown',
        license='MIT',
        description='Python reader for BGZF compressed data, validating every block and the EOF marker',
        python_requires='>=3.6',
        extras_require={
            'test': ['pytest'],
        },
        include_package_data=True
    )
