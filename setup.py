from __future__ import annotations

import logging
import os
from os.path import join as pjoin
from pathlib import Path

from setuptools import Command, setup

ROOT = Path(__file__).resolve().parent
PYPROJECT = ROOT / "pyproject.toml"


def _project_version() -> str:
    try:
        import tomllib

        with PYPROJECT.open("rb") as fh:
            data = tomllib.load(fh)
        return data["project"]["version"]
    except (OSError, KeyError, ValueError):
        from ionbench import VERSION

        return VERSION


class PrintVersion(Command):
    user_options = []

    def initialize_options(self):
        self.version = None

    def finalize_options(self):
        self.version = _project_version()

    def run(self):
        print(self.version)


class CleanCommand(Command):
    """
    Remove build output and compiled .pyc files.
    """

    user_options = [("verbose", "v", "produce verbose output")]

    def initialize_options(self):
        self._files_to_delete = []
        self._dirs_to_delete = []

        for root, dirs, files in os.walk("."):
            for f in files:
                if f.endswith(".pyc"):
                    self._files_to_delete.append(pjoin(root, f))
        for target in ("build", "dist", pjoin("src", "ionbench.egg-info")):
            for root, dirs, files in os.walk(target):
                for f in files:
                    self._files_to_delete.append(pjoin(root, f))
                for d in dirs:
                    self._dirs_to_delete.append(pjoin(root, d))
            self._dirs_to_delete.append(target)
        # children before parents
        self._dirs_to_delete = list(reversed(self._dirs_to_delete))

        self.verbose = 0

    def finalize_options(self):
        pass

    def run(self):
        for clean_me in self._files_to_delete:
            if self.dry_run:
                logging.info("Would have unlinked %s", clean_me)
                continue
            try:
                self.announce("Deleting " + clean_me, level=2)
                os.unlink(clean_me)
            except OSError:
                logging.warning("Failed to delete file %s", clean_me)
        for clean_me in self._dirs_to_delete:
            if self.dry_run:
                logging.info("Would have rmdir'ed %s", clean_me)
            elif os.path.exists(clean_me):
                try:
                    self.announce("Going to remove " + clean_me, level=2)
                    os.rmdir(clean_me)
                except OSError:
                    logging.warning("Failed to delete dir %s", clean_me)


setup(
    cmdclass={
        "clean": CleanCommand,
        "version": PrintVersion,
    },
)
