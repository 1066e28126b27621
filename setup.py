from setuptools import setup, find_packages
import re

# Read version from setaside/__init__.py
with open('setaside/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='setaside',
    version=version,
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={
        'setaside': ['tax_rules/*.yaml'],
    },
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
    ],
    extras_require={
        'mcp': [
            'mcp[cli]>=1.0.0,<2',
        ],
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'setaside=setaside.cli.__main__:main',
            'setaside-mcp=setaside.mcp.server:run_server',
        ],
    },
    author='Personal',
    description='Income tracking and tax set-aside estimates for freelancers.',
    python_requires='>=3.10',
)
