"""Packaging for FocusFlow.

Install for development:
    pip install -e ".[test]"

Build a macOS .app bundle:
    pip install py2app
    python setup.py py2app
"""

import sys

from setuptools import find_packages, setup

APP = ["main.py"]
DATA_FILES = []
OPTIONS = {
    "argv_emulation": False,
    "iconfile": None,
    "plist": {
        "CFBundleName": "FocusFlow",
        "CFBundleDisplayName": "FocusFlow",
        "CFBundleIdentifier": "com.focusflow.app",
        "CFBundleVersion": "0.1.0",
        "CFBundleShortVersionString": "0.1.0",
        "NSHighResolutionCapable": True,
        "LSMinimumSystemVersion": "13.0",
    },
}

# py2app is only pulled in when an app bundle is actually being built
bundle_args = {}
if "py2app" in sys.argv:
    bundle_args = dict(
        app=APP,
        data_files=DATA_FILES,
        options={"py2app": OPTIONS},
        setup_requires=["py2app"],
    )

setup(
    name="FocusFlow",
    version="0.1.0",
    description="Pomodoro timer with local session presets and history",
    packages=find_packages(include=["focusflow", "focusflow.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyQt6>=6.5",
        "SQLAlchemy>=2.0",
        "numpy>=1.24",
        "loguru>=0.7",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": ["focusflow=focusflow.__main__:main"],
    },
    **bundle_args,
)
