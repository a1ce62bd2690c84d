#!/usr/bin/python3

from .objects import RootFinder, Newton, ConvergenceError

__all__ = ['constants', 'objects']
