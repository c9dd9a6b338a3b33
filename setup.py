from setuptools import setup, find_packages
from config import Config

setup(
    name='cube-solver',
    version=Config.norm_version(Config.Version),
    packages=find_packages(include=['cubesolver', 'cubesolver.*']),
    py_modules=['config'],
    install_requires=[
        'numpy',
        'PyYAML',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': ['cubesolver=cubesolver.__main__:main'],
    },
    python_requires='>=3.10',
)
# python setup.py sdist
