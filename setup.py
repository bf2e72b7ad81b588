"""Setup script for astgrader project."""

from setuptools import setup, find_packages
import os

# Read version from __init__.py
def get_version():
    init_file = os.path.join(os.path.dirname(__file__), 'src', 'astgrader', '__init__.py')
    with open(init_file, 'r') as f:
        for line in f:
            if line.startswith('__version__'):
                return line.split('=')[1].strip().strip('"').strip("'")
    raise RuntimeError('Unable to find version string.')

setup(
    name="astgrader",
    version=get_version(),
    description="Rule-based static grader for JavaScript submissions",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        "pyyaml>=5.4.1",
        "esprima>=4.0.1",
        "httpx>=0.24",
    ],
    extras_require={
        "dev": [
            "pytest",
        ]
    },
    entry_points={
        "console_scripts": [
            "astgrader=astgrader.astgrader:main",
        ],
    },
)
