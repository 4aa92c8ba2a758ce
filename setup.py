"""
Setup script for Workout Map.
Install: pip install -e .[test]
macOS build: python setup.py py2app
"""

import sys

from setuptools import find_namespace_packages, setup

APP = ['app.py']
DATA_FILES = []
OPTIONS = {
    'argv_emulation': True,
    'packages': ['nicegui', 'pandas'],
    'strip': True,
    'compressed': True,
}

py2app_kwargs = {}
if 'py2app' in sys.argv:
    py2app_kwargs = dict(
        app=APP,
        data_files=DATA_FILES,
        options={'py2app': OPTIONS},
        setup_requires=['py2app'],
    )

setup(
    name='WorkoutMap',
    version='1.0.0',
    description='Log running and cycling workouts on a map.',
    python_requires='>=3.9',
    py_modules=['app', 'constants', 'db', 'location', 'state'],
    packages=find_namespace_packages(include=['core', 'components']),
    install_requires=[
        'nicegui>=2.0',
        'pandas>=1.5',
    ],
    extras_require={
        'test': ['pytest>=7'],
    },
    entry_points={
        'console_scripts': ['workout-map=app:main'],
    },
    **py2app_kwargs,
)
