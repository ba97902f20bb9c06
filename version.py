"""
Versioning utils.
"""

__all__ = ('get_version',)

import os
import logging
import os.path
import subprocess
import importlib.metadata
from os.path import dirname

logger = logging.getLogger(__file__)

UNRELEASED_VERSION = '0.0.0.dev0'


def find_git_root(test):
    prev, test = None, os.path.abspath(test)
    while prev != test:
        if os.path.isdir(os.path.join(test, '.git')):
            return test
        prev, test = test, os.path.abspath(os.path.join(test, os.pardir))
    return None


def get_version():
    """
    Gets the current version number.

    If in a git repository with a release tag, it is the most recent tag.
    Otherwise it is the version of the installed distribution, if any.
    """
    git_root = find_git_root(dirname(__file__))

    if git_root is not None:
        # Get the version using "git describe".
        cmd = 'git describe --tags --match [0-9]*'.split()
        try:
            version = subprocess.check_output(
                cmd,
                cwd=git_root,
                stderr=subprocess.DEVNULL,
            ).decode().strip()
        except (OSError, subprocess.CalledProcessError):
            logger.warning('Unable to get version number from git tags')
            return UNRELEASED_VERSION

        # PEP 440 compatibility
        if '-' in version:
            version = '.post'.join(version.split('-')[:2])

        cmd = 'git diff-index --name-only HEAD'.split()
        try:
            dirty = subprocess.check_output(cmd, cwd=git_root).decode().strip()
        except subprocess.CalledProcessError:
            logger.exception('Unable to get git index status')
            dirty = ''

        # A dirty tree is a development revision after the release.
        if dirty != '':
            version += '.dev1'

        return version

    try:
        return importlib.metadata.version('tzsource')
    except importlib.metadata.PackageNotFoundError:
        return UNRELEASED_VERSION
